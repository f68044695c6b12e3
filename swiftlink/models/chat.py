# swiftlink/models/chat.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SentBy = Literal["user", "agent"]

SENT_BY_USER = "user"
SENT_BY_AGENT = "agent"
SENT_BY = {SENT_BY_USER, SENT_BY_AGENT}

# Socket event names (client -> server)
EV_GET_USERS = "getUsersWithMessages"
EV_JOIN_ROOM = "joinRoom"
EV_LEAVE_ROOM = "leaveRoom"
EV_SEND_MESSAGE = "sendMessage"

# Socket event names (server -> client)
EV_USERS_LIST = "usersList"
EV_LOAD_MESSAGES = "loadMessages"
EV_RECEIVE_MESSAGE = "receiveMessage"
EV_NEW_USER_MESSAGE = "newUserMessage"
EV_RELAY_ERROR = "relayError"

# matches the id columns in models.orm
MAX_ID_LEN = 80

_OLDEST = datetime.min


def parse_ts(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into a naive UTC datetime.
    Anything unparseable sorts as the oldest possible value.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return _OLDEST
    else:
        return _OLDEST
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def utcnow() -> datetime:
    """Naive UTC, the way the DateTime columns store it."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_iso() -> str:
    return utcnow().isoformat()


def sort_roster(entries: list[dict]) -> list[dict]:
    """Newest conversation first."""
    return sorted(entries, key=lambda e: parse_ts(e.get("lastCreatedAt")), reverse=True)


def sort_transcript(messages: list[dict]) -> list[dict]:
    """Oldest message first."""
    return sorted(messages, key=lambda m: parse_ts(m.get("createdAt")))


class SendMessagePayload(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(alias="userId", min_length=1, max_length=MAX_ID_LEN)
    agent_id: str = Field(alias="agentId", min_length=1, max_length=MAX_ID_LEN)
    sent_by: SentBy = Field(alias="sentBy")
    message: str = Field(min_length=1, max_length=8000)

    @field_validator("user_id", "agent_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        # mobile clients send numeric ids as numbers
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("message")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message is empty")
        return v
