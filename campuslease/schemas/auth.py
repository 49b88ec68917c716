from datetime import datetime
from typing import Optional

from pydantic import field_validator

from campuslease.schemas.base import BaseSchema, IdStr


class RegisterRequest(BaseSchema):
    name: str = ""
    email: str = ""
    password: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class LoginRequest(BaseSchema):
    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserOut(BaseSchema):
    id: IdStr
    name: str
    email: str


class AdminLoginRequest(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class AdminOut(BaseSchema):
    email: str
    role: str


class AdminUserUpdate(BaseSchema):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class AdminUserOut(BaseSchema):
    id: IdStr
    name: str
    email: str
    created_at: Optional[datetime] = None


class LoginEventOut(BaseSchema):
    id: IdStr
    user_id: Optional[int] = None
    email: str
    event_type: str
    created_at: Optional[datetime] = None


class StatsOut(BaseSchema):
    users: int
    listings: int
    applications: int
    threads: int
    messages: int
