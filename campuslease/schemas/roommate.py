from typing import List, Optional

from pydantic import Field, model_validator

from campuslease.schemas.base import BaseSchema, IdStr, TimestampedSchema
from campuslease.schemas.enums import (
    Cleanliness,
    Drinking,
    GuestFrequency,
    NoiseLevel,
    PetPreference,
    SleepSchedule,
    SocialLevel,
    Smoking,
    StudyHabits,
)
from campuslease.schemas.listing import TrimmedStr


class RoommateProfileIn(BaseSchema):
    name: TrimmedStr = Field(..., min_length=1)
    age: int = Field(..., ge=16, le=120)
    gender: TrimmedStr = Field(..., min_length=1)
    university: TrimmedStr = Field(..., min_length=1)
    major: TrimmedStr = ""
    bio: TrimmedStr = ""
    photo: Optional[str] = None

    budget_min: int = Field(..., ge=0)
    budget_max: int = Field(..., ge=0)
    move_in_date: TrimmedStr = Field(..., min_length=1)
    preferred_locations: List[str] = []

    sleep_schedule: SleepSchedule
    cleanliness: Cleanliness
    noise: NoiseLevel
    guests: GuestFrequency
    smoking: Smoking
    drinking: Drinking
    pets: PetPreference
    study_habits: StudyHabits
    social_level: SocialLevel

    interests: List[str] = []

    @model_validator(mode="after")
    def check_budget(self):
        if self.budget_min > self.budget_max:
            raise ValueError("budgetMin must be <= budgetMax")
        return self


class RoommateProfileOut(RoommateProfileIn, TimestampedSchema):
    id: str
    user_id: IdStr
    compatibility_score: Optional[int] = None
