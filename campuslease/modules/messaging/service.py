import uuid
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campuslease.core.db import get_row
from campuslease.core.errors import ConflictError, InvalidPayloadError, NotFoundError
from campuslease.models.listing import Listing
from campuslease.schemas.thread import ThreadCreate

from .models import Message, Thread


def new_thread_id() -> str:
    return f"thread-{uuid.uuid4()}"


def new_message_id() -> str:
    return f"msg-{uuid.uuid4()}"


# ---------- VALIDATION ----------

def validate_thread(payload: ThreadCreate, sender_name: str, sender_email: str) -> List[str]:
    errors = []
    if payload.property_id and not payload.property_id.isdigit():
        errors.append("propertyId must be a valid listing id")
    if not payload.participant_name:
        errors.append("participantName is required")
    if "@" not in payload.participant_email:
        errors.append("participantEmail is invalid")
    if not sender_name:
        errors.append("senderName is required")
    if "@" not in (sender_email or ""):
        errors.append("senderEmail is invalid")
    if not payload.message:
        errors.append("message is required")
    return errors


# ---------- THREADS ----------

def get_messages(db: Session, thread_ids: List[str]) -> Dict[str, List[Message]]:
    grouped: Dict[str, List[Message]] = {tid: [] for tid in thread_ids}
    if not thread_ids:
        return grouped

    rows = (
        db.query(Message)
        .filter(Message.thread_id.in_(thread_ids))
        .order_by(Message.created_at.asc())
        .all()
    )
    for msg in rows:
        grouped[msg.thread_id].append(msg)
    return grouped


def list_threads(db: Session, owner_user_id: Optional[int] = None) -> List[Thread]:
    """Threads newest activity first; all of them when ``owner_user_id`` is None."""
    query = db.query(Thread)
    if owner_user_id is not None:
        query = query.filter(Thread.owner_user_id == owner_user_id)
    return query.order_by(Thread.updated_at.desc()).all()


def get_owned_thread(db: Session, thread_id: str, owner_user_id: int) -> Thread:
    thread = (
        db.query(Thread)
        .filter(Thread.id == thread_id, Thread.owner_user_id == owner_user_id)
        .first()
    )
    if not thread:
        raise NotFoundError("Thread not found")
    return thread


def create_thread(
    db: Session,
    payload: ThreadCreate,
    user_id: int,
    sender_name: str,
    sender_email: str,
) -> Thread:
    errors = validate_thread(payload, sender_name, sender_email)
    if errors:
        raise InvalidPayloadError(errors)

    property_id = int(payload.property_id) if payload.property_id else None
    if property_id is not None and not get_row(db, Listing, property_id):
        raise NotFoundError("Listing not found")

    thread_id = payload.id or new_thread_id()
    if db.get(Thread, thread_id):
        raise ConflictError("Thread already exists")

    now = datetime.utcnow()
    thread = Thread(
        id=thread_id,
        property_id=property_id,
        property_title=payload.property_title,
        participant_name=payload.participant_name,
        participant_email=payload.participant_email,
        owner_user_id=user_id,
        created_at=now,
        updated_at=now,
    )
    # the opening message is the caller's own, so it starts out read
    first = Message(
        id=new_message_id(),
        thread_id=thread_id,
        sender=sender_name,
        sender_email=sender_email,
        recipient=payload.participant_name,
        recipient_email=payload.participant_email,
        content=payload.message,
        sender_user_id=user_id,
        created_at=now,
        read=True,
    )

    db.add(thread)
    db.add(first)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Thread already exists")

    logger.info(f"[messaging] thread {thread_id} opened by user={user_id}")
    return thread


def send_message(
    db: Session,
    thread: Thread,
    user_id: int,
    sender_name: str,
    sender_email: str,
    content: str,
) -> Message:
    if not content:
        raise InvalidPayloadError(["content is required"])

    msg = Message(
        id=new_message_id(),
        thread_id=thread.id,
        sender=sender_name,
        sender_email=sender_email,
        recipient=thread.participant_name,
        recipient_email=thread.participant_email,
        content=content,
        sender_user_id=user_id,
        created_at=datetime.utcnow(),
        read=True,
    )
    db.add(msg)
    thread.updated_at = msg.created_at
    db.commit()
    db.refresh(msg)

    logger.info(f"[messaging] message {msg.id} sent in thread {thread.id}")
    return msg


def mark_thread_read(db: Session, thread: Thread) -> int:
    updated = (
        db.query(Message)
        .filter(Message.thread_id == thread.id, Message.read.is_(False))
        .update({Message.read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
