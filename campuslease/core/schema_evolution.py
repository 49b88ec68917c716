"""
Startup schema evolution for databases created by older releases.

Runs once, before the first request is served:

1. add every expected column missing from the live table (ALTER TABLE ... ADD
   COLUMN with a safe default, one statement per transaction);
2. copy the legacy ``listings.sqft`` values into ``listings.square_feet`` if
   the new column has never been populated;
3. seed a few example listings when the listings table is empty.

Every step checks the live schema / data first, so running it on every boot
is safe. Errors are not caught here: a half-evolved schema must stop startup.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine


# --------------------------------------------------
# Expected columns (SQLite DDL)
# --------------------------------------------------

LISTING_COLUMNS: dict[str, str] = {
    "square_feet": "INTEGER NOT NULL DEFAULT 0",
    "property_type": "TEXT NOT NULL DEFAULT 'Apartment'",
    "images_json": "TEXT NOT NULL DEFAULT '[]'",
    "amenities_json": "TEXT NOT NULL DEFAULT '[]'",
    "utilities_included": "INTEGER NOT NULL DEFAULT 0",
    "pets_allowed": "INTEGER NOT NULL DEFAULT 0",
    "parking_available": "INTEGER NOT NULL DEFAULT 0",
    "furnished": "INTEGER NOT NULL DEFAULT 0",
    "available_until": "TEXT",
    "owner_name": "TEXT NOT NULL DEFAULT ''",
    "owner_email": "TEXT NOT NULL DEFAULT ''",
    "owner_phone": "TEXT NOT NULL DEFAULT ''",
    "owner_user_id": "INTEGER",
    "status": "TEXT NOT NULL DEFAULT 'available'",
    "lat": "REAL NOT NULL DEFAULT 0",
    "lng": "REAL NOT NULL DEFAULT 0",
}

EXPECTED_COLUMNS: dict[str, dict[str, str]] = {
    "listings": LISTING_COLUMNS,
    "applications": {"applicant_user_id": "INTEGER"},
    "threads": {"owner_user_id": "INTEGER"},
    "messages": {"sender_user_id": "INTEGER"},
    "login_events": {"user_id": "INTEGER"},
}


@dataclass(frozen=True)
class LegacyColumn:
    table: str
    legacy: str
    current: str
    default: object = 0


# sqft was renamed to square_feet
LEGACY_COLUMNS: tuple[LegacyColumn, ...] = (
    LegacyColumn(table="listings", legacy="sqft", current="square_feet", default=0),
)


# --------------------------------------------------
# Seed data
# --------------------------------------------------

_SEED_IMAGE = (
    "https://images.unsplash.com/photo-1505691938895-1758d7feb511"
    "?q=80&w=1200&auto=format&fit=crop"
)

_SEED_OWNER = {
    "owner_name": "Campus Lease Team",
    "owner_email": "hello@campuslease.com",
    "owner_phone": "555-010-1000",
}

SEED_LISTINGS: tuple[dict, ...] = (
    {
        "title": "Sunny Studio Near Campus",
        "address": "114 Pine St",
        "city": "Seattle",
        "price": 1450,
        "bedrooms": 0,
        "bathrooms": 1,
        "square_feet": 520,
        "property_type": "Studio",
        "images_json": json.dumps([_SEED_IMAGE]),
        "amenities_json": json.dumps(["Laundry", "Furnished"]),
        "utilities_included": True,
        "pets_allowed": False,
        "parking_available": False,
        "furnished": True,
        "available_from": "2026-01-10",
        "available_until": None,
        **_SEED_OWNER,
        "status": "available",
        "lat": 47.615,
        "lng": -122.335,
        "description": "Walkable to campus, includes utilities, and has in-unit laundry.",
    },
    {
        "title": "Two Bedroom with Parking",
        "address": "820 8th Ave",
        "city": "Seattle",
        "price": 2450,
        "bedrooms": 2,
        "bathrooms": 1.5,
        "square_feet": 980,
        "property_type": "Apartment",
        "images_json": json.dumps([_SEED_IMAGE]),
        "amenities_json": json.dumps(["Parking", "Gym"]),
        "utilities_included": False,
        "pets_allowed": True,
        "parking_available": True,
        "furnished": False,
        "available_from": "2026-02-01",
        "available_until": None,
        **_SEED_OWNER,
        "status": "available",
        "lat": 47.61,
        "lng": -122.333,
        "description": "Reserved parking, updated kitchen, and a quiet courtyard view.",
    },
    {
        "title": "Room in Shared Townhome",
        "address": "67 Cedar Way",
        "city": "Seattle",
        "price": 1100,
        "bedrooms": 1,
        "bathrooms": 1,
        "square_feet": 640,
        "property_type": "Townhome",
        "images_json": json.dumps([_SEED_IMAGE]),
        "amenities_json": json.dumps(["Study Lounge", "Backyard"]),
        "utilities_included": True,
        "pets_allowed": False,
        "parking_available": True,
        "furnished": True,
        "available_from": "2026-01-05",
        "available_until": None,
        **_SEED_OWNER,
        "status": "available",
        "lat": 47.608,
        "lng": -122.337,
        "description": "Furnished room with shared kitchen, close to transit lines.",
    },
)


# --------------------------------------------------
# Report
# --------------------------------------------------

@dataclass
class EvolutionReport:
    added_columns: dict[str, list[str]] = field(default_factory=dict)
    backfilled_rows: dict[str, int] = field(default_factory=dict)
    seeded_rows: int = 0
    legacy_columns: dict[str, set[str]] = field(default_factory=dict)

    def has_legacy_column(self, table: str, column: str) -> bool:
        return column in self.legacy_columns.get(table, set())

    @property
    def changed(self) -> bool:
        return bool(
            any(self.added_columns.values())
            or any(self.backfilled_rows.values())
            or self.seeded_rows
        )


# --------------------------------------------------
# Steps
# --------------------------------------------------

def live_columns(bind: Engine | Connection, table: str) -> set[str]:
    """Column names physically present in ``table`` right now."""
    return {col["name"] for col in inspect(bind).get_columns(table)}


def ensure_columns(engine: Engine, table: str, column_map: dict[str, str]) -> list[str]:
    """
    Add each column of ``column_map`` that ``table`` lacks.

    Returns the names actually added, in declaration order. Existing columns
    are left untouched, whatever their definition.
    """
    existing = live_columns(engine, table)
    added: list[str] = []

    for name, definition in column_map.items():
        if name in existing:
            continue
        logger.info(f"Adding column {table}.{name} ({definition})")
        with engine.begin() as conn:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {definition}"))
        added.append(name)

    return added


def backfill_legacy_column(engine: Engine, column: LegacyColumn) -> int:
    """
    Copy ``legacy`` into ``current`` while ``current`` is still unpopulated.

    "Unpopulated" means no row holds a value other than the default. This is a
    heuristic: a table whose rows were all saved with the default after the
    rename looks identical to one that was never migrated.
    """
    with engine.begin() as conn:
        columns = live_columns(conn, column.table)
        if column.legacy not in columns or column.current not in columns:
            return 0

        populated = conn.execute(
            text(
                f"SELECT COUNT(*) FROM {column.table} "
                f"WHERE {column.current} != :default"
            ),
            {"default": column.default},
        ).scalar_one()
        if populated:
            return 0

        result = conn.execute(
            text(
                f"UPDATE {column.table} SET {column.current} = {column.legacy} "
                f"WHERE {column.current} = :default"
            ),
            {"default": column.default},
        )
        copied = result.rowcount or 0

    if copied:
        logger.info(
            f"Back-filled {copied} rows: "
            f"{column.table}.{column.legacy} -> {column.table}.{column.current}"
        )
    return copied


def _insert_listing_sql(columns: list[str]) -> str:
    names = ", ".join(columns)
    values = ", ".join(f":{name}" for name in columns)
    return f"INSERT INTO listings ({names}) VALUES ({values})"


def seed_listings(
    engine: Engine,
    rows: tuple[dict, ...] = SEED_LISTINGS,
    legacy_sqft: bool = False,
) -> int:
    """Insert ``rows`` in one transaction if ``listings`` is empty."""
    if not rows:
        return 0

    with engine.begin() as conn:
        count = conn.execute(text("SELECT COUNT(*) FROM listings")).scalar_one()
        if count:
            return 0

        columns = list(rows[0].keys())
        if legacy_sqft:
            columns.append("sqft")
        stmt = text(_insert_listing_sql(columns))

        for row in rows:
            params = dict(row)
            if legacy_sqft:
                params["sqft"] = params["square_feet"]
            conn.execute(stmt, params)

    logger.info(f"Seeded {len(rows)} example listings")
    return len(rows)


# --------------------------------------------------
# Entry point
# --------------------------------------------------

def evolve_schema(
    engine: Engine,
    expected: dict[str, dict[str, str]] = EXPECTED_COLUMNS,
    legacy: tuple[LegacyColumn, ...] = LEGACY_COLUMNS,
    seed_rows: tuple[dict, ...] = SEED_LISTINGS,
) -> EvolutionReport:
    report = EvolutionReport()

    for table, column_map in expected.items():
        report.added_columns[table] = ensure_columns(engine, table, column_map)

    for column in legacy:
        key = f"{column.table}.{column.current}"
        report.backfilled_rows[key] = backfill_legacy_column(engine, column)
        if column.legacy in live_columns(engine, column.table):
            report.legacy_columns.setdefault(column.table, set()).add(column.legacy)

    report.seeded_rows = seed_listings(
        engine,
        seed_rows,
        legacy_sqft=report.has_legacy_column("listings", "sqft"),
    )

    logger.info(
        f"Schema evolution done | added={report.added_columns} "
        f"backfilled={report.backfilled_rows} seeded={report.seeded_rows}"
    )
    return report
