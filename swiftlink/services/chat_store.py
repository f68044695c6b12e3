# swiftlink/services/chat_store.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from swiftlink.models.chat import SENT_BY, sort_roster, utcnow
from swiftlink.models.orm import Message, User

logger = logging.getLogger("swiftlink.chat_store")

MAX_ACCOUNT_ID_DIGITS = 18


def append_message(
    db: Session,
    user_id: str,
    agent_id: str,
    sent_by: str,
    message: str,
    *,
    created_at: Optional[datetime] = None,
) -> dict:
    text = (message or "").strip()
    if not user_id or not agent_id or not text or sent_by not in SENT_BY:
        raise ValueError("invalid message")

    row = Message(
        user_id=str(user_id),
        agent_id=str(agent_id),
        sent_by=sent_by,
        message=text,
        created_at=created_at or utcnow(),
    )
    db.add(row)
    db.flush()
    logger.info("WRITE chat_store user=%s agent=%s by=%s len=%d", user_id, agent_id, sent_by, len(text))
    return row.to_dict()


def list_messages(db: Session, user_id: str, agent_id: Optional[str] = None) -> List[dict]:
    """Transcript of one conversation room, oldest first."""
    q = db.query(Message).filter(Message.user_id == str(user_id))
    if agent_id:
        q = q.filter(Message.agent_id == str(agent_id))
    rows = q.order_by(Message.created_at.asc(), Message.id.asc()).all()
    return [r.to_dict() for r in rows]


def _display_names(db: Session, user_ids: List[str]) -> Dict[str, str]:
    # ids int() accepts and an INTEGER column can hold
    numeric = [int(u) for u in user_ids if u.isdecimal() and len(u) <= MAX_ACCOUNT_ID_DIGITS]
    if not numeric:
        return {}
    users = db.query(User).filter(User.id.in_(numeric)).all()
    return {str(u.id): u.display_name() for u in users}


def roster_for_agent(db: Session, agent_id: str) -> List[dict]:
    """
    One entry per user who has exchanged messages with this agent,
    newest conversation first.
    """
    rows = (
        db.query(Message)
        .filter(Message.agent_id == str(agent_id))
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
    latest: Dict[str, Message] = {}
    for r in rows:
        latest[r.user_id] = r

    names = _display_names(db, list(latest))
    out = [
        {
            "userId": uid,
            "userName": names.get(uid, uid),
            "lastMessage": m.message,
            "lastCreatedAt": m.created_at.isoformat(),
        }
        for uid, m in latest.items()
    ]
    out = sort_roster(out)
    logger.debug("roster agent=%s users=%d", agent_id, len(out))
    return out


def stats(db: Session) -> dict:
    return {
        "messages": db.query(Message).count(),
        "conversations": db.query(Message.user_id, Message.agent_id).distinct().count(),
    }
