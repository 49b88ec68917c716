import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.sql import func

from campuslease.core.db import Base


class RoommateProfile(Base):
    __tablename__ = "roommate_profiles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, nullable=False, unique=True, index=True)

    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String, nullable=False)
    university = Column(String, nullable=False)
    major = Column(String, nullable=False)
    bio = Column(Text, nullable=False, default="")
    photo = Column(String, nullable=True)

    budget_min = Column(Integer, nullable=False)
    budget_max = Column(Integer, nullable=False)
    move_in_date = Column(String, nullable=False)

    # list of neighborhoods / cities: ["Capitol Hill", "U District"]
    preferred_locations = Column(JSON, nullable=False, default=list)

    # enumerated lifestyle answers, see campuslease.schemas.enums
    sleep_schedule = Column(String, nullable=False)
    cleanliness = Column(String, nullable=False)
    noise = Column(String, nullable=False)
    guests = Column(String, nullable=False)
    smoking = Column(String, nullable=False)
    drinking = Column(String, nullable=False)
    pets = Column(String, nullable=False)
    study_habits = Column(String, nullable=False)
    social_level = Column(String, nullable=False)

    # free-text tags like ["hiking","coffee","gaming"]
    interests = Column(JSON, nullable=False, default=list)

    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        server_default=func.now(),
    )
