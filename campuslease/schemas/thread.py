from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BeforeValidator

from campuslease.schemas.base import BaseSchema
from campuslease.schemas.listing import TrimmedStr


def _optional_str(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


OptionalStr = Annotated[Optional[str], BeforeValidator(_optional_str)]


class ThreadCreate(BaseSchema):
    id: OptionalStr = None
    property_id: OptionalStr = None
    property_title: OptionalStr = None
    participant_name: TrimmedStr = ""
    participant_email: TrimmedStr = ""
    message: TrimmedStr = ""


class MessageCreate(BaseSchema):
    content: TrimmedStr = ""


class MessageOut(BaseSchema):
    id: str
    thread_id: str
    sender: str
    sender_email: str
    recipient: str
    recipient_email: str
    content: str
    created_at: Optional[datetime] = None
    read: bool = False


class ThreadOut(BaseSchema):
    id: str
    property_id: OptionalStr = None
    property_title: Optional[str] = None
    participant_name: str
    participant_email: str
    messages: List[MessageOut] = []
