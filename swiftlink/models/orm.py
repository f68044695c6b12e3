# swiftlink/models/orm.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from swiftlink.core.db import Base
from swiftlink.models.chat import utcnow


# ---------- Accounts (end-users and agents) ----------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255))

    # 'user' talks to support, 'agent' answers
    role: Mapped[str] = mapped_column(String(20), default="user")

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'agent')", name="chk_users_role"),
    )

    def display_name(self) -> str:
        return self.full_name or self.email


# ---------- Chat history ----------
class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # ids are opaque strings on the wire; end-users may not have an account row
    user_id: Mapped[str] = mapped_column(String(80), index=True)
    agent_id: Mapped[str] = mapped_column(String(80), index=True)
    sent_by: Mapped[str] = mapped_column(String(10))
    message: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    __table_args__ = (
        CheckConstraint("sent_by IN ('user', 'agent')", name="chk_messages_sent_by"),
        Index("ix_messages_agent_user", "agent_id", "user_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "agentId": self.agent_id,
            "sentBy": self.sent_by,
            "message": self.message,
            "createdAt": self.created_at.isoformat(),
        }
