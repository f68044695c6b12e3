# swiftlink/api/relay.py
"""
Socket relay between end-users and agents.

Rooms:
  user:<userId>    one conversation; both sides join it to get live messages
  agent:<agentId>  an agent's inbox; receives newUserMessage notifications
"""
from __future__ import annotations

import logging
from typing import Any, Callable, ContextManager, Dict, Optional

import socketio
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from swiftlink.core.db import session_scope
from swiftlink.models import chat as chat_models
from swiftlink.models.chat import MAX_ID_LEN, SendMessagePayload
from swiftlink.services import chat_store
from swiftlink.services.rooms import RoomRegistry, agent_room, user_room

logger = logging.getLogger("swiftlink.api.relay")


def _as_id(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value) if len(str(value)) <= MAX_ID_LEN else None
    if isinstance(value, str) and 0 < len(value.strip()) <= MAX_ID_LEN:
        return value.strip()
    return None


class RelayServer:
    def __init__(
        self,
        sio: socketio.AsyncServer,
        rooms: Optional[RoomRegistry] = None,
        session_factory: Callable[[], ContextManager[Session]] = session_scope,
    ) -> None:
        self.sio = sio
        self.rooms = rooms or RoomRegistry()
        self._session = session_factory
        # sid -> agentId, learned from getUsersWithMessages
        self._agents: Dict[str, str] = {}

    def register(self) -> "RelayServer":
        self.sio.on("connect", handler=self.on_connect)
        self.sio.on("disconnect", handler=self.on_disconnect)
        self.sio.on(chat_models.EV_GET_USERS, handler=self.on_get_users)
        self.sio.on(chat_models.EV_JOIN_ROOM, handler=self.on_join_room)
        self.sio.on(chat_models.EV_LEAVE_ROOM, handler=self.on_leave_room)
        self.sio.on(chat_models.EV_SEND_MESSAGE, handler=self.on_send_message)
        return self

    async def _reject(self, sid: str, event: str, detail: str) -> None:
        logger.warning("relay: rejected event=%s sid=%s detail=%s", event, sid, detail)
        await self.sio.emit(chat_models.EV_RELAY_ERROR, {"event": event, "detail": detail}, to=sid)

    # ------------------------------ lifecycle ---------------------------------

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        logger.info("relay: connect sid=%s remote=%s", sid, environ.get("REMOTE_ADDR", "-"))

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        left = self.rooms.drop(sid)
        self._agents.pop(sid, None)
        logger.info("relay: disconnect sid=%s reason=%s rooms=%s", sid, reason, left)

    # ------------------------------ storage (threadpool) ----------------------

    def _load_roster(self, agent_id: str) -> list:
        with self._session() as db:
            return chat_store.roster_for_agent(db, agent_id)

    def _load_history(self, user_id: str, agent_id: Optional[str]) -> list:
        with self._session() as db:
            return chat_store.list_messages(db, user_id, agent_id=agent_id)

    def _store(self, payload: SendMessagePayload) -> dict:
        with self._session() as db:
            return chat_store.append_message(
                db, payload.user_id, payload.agent_id, payload.sent_by, payload.message
            )

    # ------------------------------ events ------------------------------------

    async def on_get_users(self, sid: str, agent_id: Any = None) -> None:
        aid = _as_id(agent_id)
        if not aid:
            await self._reject(sid, chat_models.EV_GET_USERS, "agentId is required")
            return

        self._agents[sid] = aid
        room = agent_room(aid)
        if sid not in self.rooms.members(room):
            await self.sio.enter_room(sid, room)
            self.rooms.join(sid, room)

        try:
            roster = await run_in_threadpool(self._load_roster, aid)
        except Exception:
            logger.exception("relay: roster query failed agent=%s", aid)
            await self._reject(sid, chat_models.EV_GET_USERS, "roster unavailable")
            return

        logger.info("relay: usersList agent=%s sid=%s count=%d", aid, sid, len(roster))
        await self.sio.emit(chat_models.EV_USERS_LIST, roster, to=sid)

    async def on_join_room(self, sid: str, user_id: Any = None) -> None:
        uid = _as_id(user_id)
        if not uid:
            await self._reject(sid, chat_models.EV_JOIN_ROOM, "userId is required")
            return

        room = user_room(uid)
        await self.sio.enter_room(sid, room)
        self.rooms.join(sid, room)

        try:
            history = await run_in_threadpool(self._load_history, uid, self._agents.get(sid))
        except Exception:
            logger.exception("relay: history query failed user=%s", uid)
            await self._reject(sid, chat_models.EV_JOIN_ROOM, "history unavailable")
            return

        logger.info("relay: loadMessages room=%s sid=%s count=%d", room, sid, len(history))
        await self.sio.emit(chat_models.EV_LOAD_MESSAGES, history, to=sid)

    async def on_leave_room(self, sid: str, user_id: Any = None) -> None:
        uid = _as_id(user_id)
        if not uid:
            await self._reject(sid, chat_models.EV_LEAVE_ROOM, "userId is required")
            return
        room = user_room(uid)
        await self.sio.leave_room(sid, room)
        if not self.rooms.leave(sid, room):
            logger.info("relay: leave for room not joined sid=%s room=%s", sid, room)

    async def on_send_message(self, sid: str, data: Any = None) -> None:
        try:
            payload = SendMessagePayload.model_validate(data)
        except ValidationError as e:
            await self._reject(sid, chat_models.EV_SEND_MESSAGE, f"invalid payload: {e.error_count()} error(s)")
            return

        try:
            msg = await run_in_threadpool(self._store, payload)
        except ValueError as e:
            await self._reject(sid, chat_models.EV_SEND_MESSAGE, str(e))
            return
        except Exception:
            logger.exception("relay: store failed user=%s agent=%s", payload.user_id, payload.agent_id)
            await self._reject(sid, chat_models.EV_SEND_MESSAGE, "message not stored")
            return

        room = user_room(payload.user_id)
        # the sender already appended its own copy
        await self.sio.emit(chat_models.EV_RECEIVE_MESSAGE, msg, room=room, skip_sid=sid)

        sent_to_inbox = False
        if payload.sent_by == chat_models.SENT_BY_USER:
            skip = sorted(self.rooms.members(room) | {sid})
            await self.sio.emit(
                chat_models.EV_NEW_USER_MESSAGE, msg, room=agent_room(payload.agent_id), skip_sid=skip
            )
            sent_to_inbox = True

        logger.info(
            "relay: message user=%s agent=%s by=%s room=%s inbox=%s",
            payload.user_id, payload.agent_id, payload.sent_by, room, sent_to_inbox,
        )

    # ------------------------------ introspection -----------------------------

    def stats(self) -> dict:
        per = self.rooms.stats()
        total = per.pop("__total__", 0)
        return {
            "sockets": total,
            "agents": len(self._agents),
            "rooms": [{"room": k, "members": v} for k, v in sorted(per.items())],
        }


def create_socket_server(cors_origins: list[str]) -> socketio.AsyncServer:
    allowed = "*" if cors_origins == ["*"] else cors_origins
    return socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=allowed, logger=False)
