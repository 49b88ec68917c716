from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from campuslease.core.db import Base


class Thread(Base):
    __tablename__ = "threads"

    # "thread-<uuid>" unless the client supplies its own id
    id = Column(String, primary_key=True)
    property_id = Column(Integer, ForeignKey("listings.id"), nullable=True)
    property_title = Column(String, nullable=True)
    participant_name = Column(String, nullable=False)
    participant_email = Column(String, nullable=False)
    owner_user_id = Column(Integer, nullable=True, index=True)

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
        server_default=func.now(),
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(String, primary_key=True)
    thread_id = Column(String, ForeignKey("threads.id"), nullable=False, index=True)
    sender = Column(String, nullable=False)
    sender_email = Column(String, nullable=False)
    recipient = Column(String, nullable=False)
    recipient_email = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    sender_user_id = Column(Integer, nullable=True)

    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        server_default=func.now(),
    )
    read = Column(Boolean, nullable=False, default=False, server_default="0")
