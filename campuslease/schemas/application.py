from datetime import datetime
from typing import Optional

from campuslease.schemas.base import BaseSchema, IdStr
from campuslease.schemas.listing import TrimmedStr


class ApplicationIn(BaseSchema):
    listing_id: int = 0
    phone: TrimmedStr = ""
    message: TrimmedStr = ""


class ApplicationOut(BaseSchema):
    id: IdStr
    listing_id: IdStr
    name: str
    email: str
    phone: Optional[str] = ""
    message: Optional[str] = ""
    applicant_user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class AdminApplicationOut(ApplicationOut):
    listing_title: Optional[str] = None
