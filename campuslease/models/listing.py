from datetime import datetime

from sqlalchemy import (
    Column,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import func

from campuslease.core.db import Base


class Listing(Base):
    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Float, nullable=False)
    square_feet = Column(Integer, nullable=False, server_default="0")
    property_type = Column(String, nullable=False, server_default="Apartment")

    # JSON arrays stored as text: '["Laundry","Gym"]'
    images_json = Column(Text, nullable=False, server_default="[]")
    amenities_json = Column(Text, nullable=False, server_default="[]")

    utilities_included = Column(Boolean, nullable=False, server_default="0")
    pets_allowed = Column(Boolean, nullable=False, server_default="0")
    parking_available = Column(Boolean, nullable=False, server_default="0")
    furnished = Column(Boolean, nullable=False, server_default="0")

    available_from = Column(String, nullable=False)
    available_until = Column(String, nullable=True)

    owner_name = Column(String, nullable=False, server_default="")
    owner_email = Column(String, nullable=False, server_default="")
    owner_phone = Column(String, nullable=False, server_default="")
    owner_user_id = Column(Integer, nullable=True)

    status = Column(String, nullable=False, server_default="available")
    lat = Column(Float, nullable=False, server_default="0")
    lng = Column(Float, nullable=False, server_default="0")
    description = Column(Text, nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    message = Column(Text, nullable=True)
    applicant_user_id = Column(Integer, nullable=True)

    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        server_default=func.now(),
    )
