import math
from datetime import datetime
from typing import Annotated, List, Optional, Union

from pydantic import BeforeValidator, Field, field_validator

from campuslease.schemas.base import BaseSchema, IdStr
from campuslease.schemas.enums import PropertyStatus, PropertyType


def parse_number(value):
    """
    Lenient number parsing for form input: "1,450" -> 1450.0, "" / None -> 0.
    Anything unparseable becomes NaN so validation can report it.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return 0
        try:
            return float(cleaned)
        except ValueError:
            return math.nan
    return math.nan


def _clean_str(value):
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else value


Number = Union[int, float]
TrimmedStr = Annotated[str, BeforeValidator(_clean_str)]
LenientFloat = Annotated[float, BeforeValidator(parse_number)]


# ---- INPUT ----

class OwnerIn(BaseSchema):
    name: TrimmedStr = ""
    email: TrimmedStr = ""
    phone: TrimmedStr = ""


class CoordinatesIn(BaseSchema):
    lat: LenientFloat = 0
    lng: LenientFloat = 0


class ListingIn(BaseSchema):
    title: TrimmedStr = ""
    address: TrimmedStr = ""
    city: TrimmedStr = ""
    price: LenientFloat = 0
    bedrooms: LenientFloat = 0
    bathrooms: LenientFloat = 0
    square_feet: LenientFloat = 0
    property_type: Optional[PropertyType] = Field(None, alias="type")
    images: List[str] = []
    amenities: List[str] = []
    utilities_included: bool = False
    pets_allowed: bool = False
    parking_available: bool = False
    furnished: bool = False
    available_from: TrimmedStr = ""
    available_until: Optional[str] = None
    owner: OwnerIn = OwnerIn()
    status: PropertyStatus = PropertyStatus.available
    coordinates: CoordinatesIn = CoordinatesIn()
    description: TrimmedStr = ""

    @field_validator("property_type", mode="before")
    @classmethod
    def blank_type(cls, v):
        return None if v == "" else v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or PropertyStatus.available

    @field_validator("owner", "coordinates", mode="before")
    @classmethod
    def default_nested(cls, v):
        return {} if v is None else v


# ---- OUTPUT ----

class OwnerOut(BaseSchema):
    name: str = ""
    email: str = ""
    phone: str = ""


class CoordinatesOut(BaseSchema):
    lat: float = 0
    lng: float = 0


class ListingOut(BaseSchema):
    id: IdStr
    title: str
    address: str
    city: str
    price: Number
    bedrooms: Number
    bathrooms: Number
    square_feet: Number
    property_type: str = Field(alias="type")
    images: List[str]
    amenities: List[str]
    utilities_included: bool
    pets_allowed: bool
    parking_available: bool
    furnished: bool
    available_from: str
    available_until: str = ""
    owner: OwnerOut
    status: str
    coordinates: CoordinatesOut
    description: str
    created_date: Optional[datetime] = None
