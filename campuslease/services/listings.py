import json
import math
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.orm import Session

from campuslease.core.db import fits_integer, get_row
from campuslease.core.errors import ForbiddenError, InvalidPayloadError, NotFoundError
from campuslease.core.schema_evolution import EvolutionReport
from campuslease.models.listing import Application, Listing
from campuslease.modules.messaging.models import Message, Thread
from campuslease.schemas.listing import (
    CoordinatesOut,
    ListingIn,
    ListingOut,
    OwnerOut,
)

# Columns written on insert/update, in order
LISTING_WRITE_COLUMNS = (
    "title",
    "address",
    "city",
    "price",
    "bedrooms",
    "bathrooms",
    "square_feet",
    "property_type",
    "images_json",
    "amenities_json",
    "utilities_included",
    "pets_allowed",
    "parking_available",
    "furnished",
    "available_from",
    "available_until",
    "owner_name",
    "owner_email",
    "owner_phone",
    "owner_user_id",
    "status",
    "lat",
    "lng",
    "description",
)


# ---------- SERIALIZATION ----------

def safe_json_array(value: Optional[str]) -> List[Any]:
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return []
    return parsed if isinstance(parsed, list) else []


def _number(value):
    # integral floats become ints only while they fit the INTEGER column
    if isinstance(value, float) and value.is_integer() and fits_integer(value):
        return int(value)
    return value


def listing_out(row: Listing) -> ListingOut:
    return ListingOut(
        id=row.id,
        title=row.title,
        address=row.address,
        city=row.city,
        price=_number(row.price),
        bedrooms=_number(row.bedrooms),
        bathrooms=_number(row.bathrooms),
        square_feet=_number(row.square_feet),
        property_type=row.property_type,
        images=safe_json_array(row.images_json),
        amenities=safe_json_array(row.amenities_json),
        utilities_included=bool(row.utilities_included),
        pets_allowed=bool(row.pets_allowed),
        parking_available=bool(row.parking_available),
        furnished=bool(row.furnished),
        available_from=row.available_from,
        available_until=row.available_until or "",
        owner=OwnerOut(
            name=row.owner_name or "",
            email=row.owner_email or "",
            phone=row.owner_phone or "",
        ),
        status=row.status or "available",
        coordinates=CoordinatesOut(lat=row.lat or 0, lng=row.lng or 0),
        description=row.description,
        created_date=row.created_at,
    )


# ---------- VALIDATION ----------

def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def validate_listing(payload: ListingIn) -> List[str]:
    errors = []
    if not payload.title:
        errors.append("title is required")
    if not payload.address:
        errors.append("address is required")
    if not payload.city:
        errors.append("city is required")
    if not _positive(payload.price):
        errors.append("price must be > 0")
    if not (math.isfinite(payload.bedrooms) and payload.bedrooms >= 0):
        errors.append("bedrooms must be >= 0")
    if not _positive(payload.bathrooms):
        errors.append("bathrooms must be > 0")
    if not _positive(payload.square_feet):
        errors.append("squareFeet must be > 0")
    if payload.property_type is None:
        errors.append("type is required")
    if not payload.available_from:
        errors.append("availableFrom is required")
    if not payload.description:
        errors.append("description is required")
    return errors


def ensure_valid(payload: ListingIn) -> None:
    errors = validate_listing(payload)
    if errors:
        raise InvalidPayloadError(errors)


# ---------- PERSISTENCE ----------

def listing_params(payload: ListingIn, owner_user_id: Optional[int]) -> Dict[str, Any]:
    return {
        "title": payload.title,
        "address": payload.address,
        "city": payload.city,
        "price": _number(payload.price),
        "bedrooms": _number(payload.bedrooms),
        "bathrooms": _number(payload.bathrooms),
        "square_feet": _number(payload.square_feet),
        "property_type": payload.property_type.value,
        "images_json": json.dumps(payload.images),
        "amenities_json": json.dumps(payload.amenities),
        "utilities_included": payload.utilities_included,
        "pets_allowed": payload.pets_allowed,
        "parking_available": payload.parking_available,
        "furnished": payload.furnished,
        "available_from": payload.available_from,
        "available_until": payload.available_until or None,
        "owner_name": payload.owner.name,
        "owner_email": payload.owner.email,
        "owner_phone": payload.owner.phone,
        "owner_user_id": owner_user_id,
        "status": payload.status.value,
        "lat": payload.coordinates.lat,
        "lng": payload.coordinates.lng,
        "description": payload.description,
    }


def _write_columns(schema: EvolutionReport) -> List[str]:
    columns = list(LISTING_WRITE_COLUMNS)
    # keep the pre-rename NOT NULL column in step with square_feet
    if schema.has_legacy_column("listings", "sqft"):
        columns.append("sqft")
    return columns


def _with_legacy(params: Dict[str, Any], columns: List[str]) -> Dict[str, Any]:
    if "sqft" in columns:
        params = dict(params, sqft=params["square_feet"])
    return params


def get_listing(db: Session, listing_id: int) -> Listing:
    listing = get_row(db, Listing, listing_id)
    if not listing:
        raise NotFoundError("Listing not found")
    return listing


def list_listings(
    db: Session,
    city: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    bedrooms: Optional[float] = None,
) -> List[Listing]:
    query = db.query(Listing)

    if city:
        query = query.filter(Listing.city == city.strip())
    if min_price is not None:
        query = query.filter(Listing.price >= min_price)
    if max_price is not None:
        query = query.filter(Listing.price <= max_price)
    if bedrooms is not None:
        query = query.filter(Listing.bedrooms == bedrooms)

    return query.order_by(Listing.created_at.desc(), Listing.id.desc()).all()


def create_listing(
    db: Session,
    schema: EvolutionReport,
    payload: ListingIn,
    owner_user_id: Optional[int],
) -> Listing:
    ensure_valid(payload)

    columns = _write_columns(schema)
    names = ", ".join(columns + ["created_at", "updated_at"])
    values = ", ".join([f":{c}" for c in columns] + ["CURRENT_TIMESTAMP", "CURRENT_TIMESTAMP"])
    params = _with_legacy(listing_params(payload, owner_user_id), columns)

    result = db.execute(text(f"INSERT INTO listings ({names}) VALUES ({values})"), params)
    listing_id = result.lastrowid
    db.commit()

    logger.info(f"[listings] created listing {listing_id} owner={owner_user_id}")
    return get_listing(db, listing_id)


def update_listing(
    db: Session,
    schema: EvolutionReport,
    listing_id: int,
    payload: ListingIn,
    owner_user_id: Optional[int],
) -> Listing:
    ensure_valid(payload)

    columns = _write_columns(schema)
    assignments = ", ".join(f"{c} = :{c}" for c in columns)
    params = _with_legacy(listing_params(payload, owner_user_id), columns)
    params["id"] = listing_id

    result = db.execute(
        text(
            f"UPDATE listings SET {assignments}, updated_at = CURRENT_TIMESTAMP "
            f"WHERE id = :id"
        ),
        params,
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Listing not found")
    db.commit()

    # the raw UPDATE bypassed the identity map
    listing = get_listing(db, listing_id)
    db.refresh(listing)

    logger.info(f"[listings] updated listing {listing_id}")
    return listing


def check_owner(listing: Listing, user_id: int, action: str) -> None:
    # listings without an owner (seed data) are open to any signed-in user
    if listing.owner_user_id and int(listing.owner_user_id) != int(user_id):
        raise ForbiddenError(f"Not allowed to {action} this listing")


def delete_listing_cascade(db: Session, listing_id: int) -> None:
    """
    Delete a listing with its applications, threads and their messages.
    All-or-nothing.
    """
    if not fits_integer(listing_id):
        raise NotFoundError("Listing not found")

    try:
        deleted_apps = (
            db.query(Application)
            .filter(Application.listing_id == listing_id)
            .delete(synchronize_session=False)
        )

        thread_ids = [
            t.id for t in db.query(Thread.id).filter(Thread.property_id == listing_id).all()
        ]
        deleted_msgs = 0
        if thread_ids:
            deleted_msgs = (
                db.query(Message)
                .filter(Message.thread_id.in_(thread_ids))
                .delete(synchronize_session=False)
            )
        db.query(Thread).filter(Thread.property_id == listing_id).delete(
            synchronize_session=False
        )

        deleted = (
            db.query(Listing)
            .filter(Listing.id == listing_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise NotFoundError("Listing not found")

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"[listings] deleted listing {listing_id} "
        f"(applications={deleted_apps}, threads={len(thread_ids)}, messages={deleted_msgs})"
    )
