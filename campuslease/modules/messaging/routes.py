from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campuslease.core.auth import AuthUser, get_current_user
from campuslease.core.db import get_db
from campuslease.schemas.thread import MessageCreate, MessageOut, ThreadCreate, ThreadOut

from .models import Message, Thread
from .service import (
    create_thread,
    get_messages,
    get_owned_thread,
    list_threads,
    mark_thread_read,
    send_message,
)

router = APIRouter(prefix="/threads", tags=["threads"])


def thread_out(thread: Thread, messages: List[Message]) -> ThreadOut:
    return ThreadOut(
        id=thread.id,
        property_id=thread.property_id,
        property_title=thread.property_title,
        participant_name=thread.participant_name,
        participant_email=thread.participant_email,
        messages=[MessageOut.model_validate(m) for m in messages],
    )


def threads_with_messages(db: Session, threads: List[Thread]) -> List[ThreadOut]:
    grouped = get_messages(db, [t.id for t in threads])
    return [thread_out(t, grouped[t.id]) for t in threads]


@router.get("", response_model=List[ThreadOut])
def thread_list(
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    return threads_with_messages(db, list_threads(db, user.user_id))


@router.get("/{thread_id}", response_model=ThreadOut)
def thread_detail(
    thread_id: str,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    thread = get_owned_thread(db, thread_id, user.user_id)
    return threads_with_messages(db, [thread])[0]


@router.post("", response_model=ThreadOut, status_code=201)
def thread_create(
    payload: ThreadCreate,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    thread = create_thread(db, payload, user.user_id, user.name, user.email)
    return threads_with_messages(db, [thread])[0]


@router.post("/{thread_id}/messages", response_model=MessageOut, status_code=201)
def message_send(
    thread_id: str,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    thread = get_owned_thread(db, thread_id, user.user_id)
    return send_message(db, thread, user.user_id, user.name, user.email, payload.content)


@router.post("/{thread_id}/read")
def thread_mark_read(
    thread_id: str,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    thread = get_owned_thread(db, thread_id, user.user_id)
    mark_thread_read(db, thread)
    return {"ok": True}
