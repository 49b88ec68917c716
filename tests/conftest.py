"""
Pytest configuration and fixtures.

Every test gets its own SQLite file under ``tmp_path`` and its own app
instance, so nothing leaks between tests.
"""

import os

# config is read at import time
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["FRONTEND_URL"] = ""
os.environ["COOKIE_SECURE"] = "false"
os.environ["SEED_EXAMPLE_LISTINGS"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from campuslease.core.config import ADMIN_EMAIL, ADMIN_PASSWORD
from campuslease.core.db import make_engine
from campuslease.factory import create_app


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "api: exercises the HTTP surface through TestClient")
    config.addinivalue_line("markers", "db: touches a real SQLite database file")


# ---- DATABASE ----

@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'campuslease.db'}"


@pytest.fixture
def engine(db_url):
    engine = make_engine(db_url)
    yield engine
    engine.dispose()


LEGACY_DDL = (
    """
    CREATE TABLE listings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        address TEXT NOT NULL,
        city TEXT NOT NULL,
        price INTEGER NOT NULL,
        bedrooms INTEGER NOT NULL,
        bathrooms REAL NOT NULL,
        sqft INTEGER NOT NULL,
        available_from TEXT NOT NULL,
        description TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE applications (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        listing_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        phone TEXT,
        message TEXT,
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE threads (
        id TEXT PRIMARY KEY,
        property_id INTEGER,
        property_title TEXT,
        participant_name TEXT NOT NULL,
        participant_email TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE messages (
        id TEXT PRIMARY KEY,
        thread_id TEXT NOT NULL,
        sender TEXT NOT NULL,
        sender_email TEXT NOT NULL,
        recipient TEXT NOT NULL,
        recipient_email TEXT NOT NULL,
        content TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        read INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE login_events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT NOT NULL,
        event_type TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
)


@pytest.fixture
def legacy_engine(engine):
    """An engine over a database laid out the way the first release left it."""
    with engine.begin() as conn:
        for ddl in LEGACY_DDL:
            conn.execute(text(ddl))
    return engine


def insert_legacy_listing(engine, title, sqft, city="Seattle", price=1200):
    with engine.begin() as conn:
        conn.execute(
            text(
                "INSERT INTO listings "
                "(title, address, city, price, bedrooms, bathrooms, sqft, available_from, description) "
                "VALUES (:title, '1 Main St', :city, :price, 1, 1, :sqft, '2026-01-01', 'old row')"
            ),
            {"title": title, "city": city, "price": price, "sqft": sqft},
        )


# ---- APP ----

@pytest.fixture
def app(db_url):
    app = create_app(database_url=db_url, seed=False)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def make_client(app):
    """Factory for independent clients (separate cookie jars) on the same app."""
    clients = []

    def _make():
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


def register(client, name="Alice Student", email="alice@uw.edu", password="password123"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def alice(make_client):
    client = make_client()
    user = register(client)
    return client, user


@pytest.fixture
def bob(make_client):
    client = make_client()
    user = register(client, name="Bob Renter", email="bob@uw.edu")
    return client, user


@pytest.fixture
def admin_client(make_client):
    client = make_client()
    response = client.post(
        "/api/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def listing_payload():
    return {
        "title": "Cozy One Bedroom",
        "address": "4500 Brooklyn Ave NE",
        "city": "Seattle",
        "price": "1,650",
        "bedrooms": 1,
        "bathrooms": 1,
        "squareFeet": "700",
        "type": "Apartment",
        "images": ["https://example.com/a.jpg"],
        "amenities": ["Laundry"],
        "utilitiesIncluded": True,
        "petsAllowed": False,
        "parkingAvailable": True,
        "furnished": False,
        "availableFrom": "2026-09-01",
        "availableUntil": "",
        "owner": {"phone": "555-123-4567"},
        "status": "available",
        "coordinates": {"lat": 47.66, "lng": -122.31},
        "description": "Bright unit five minutes from campus.",
    }


def create_listing(client, payload):
    response = client.post("/api/listings", json=payload)
    assert response.status_code == 201, response.text
    return response.json()
