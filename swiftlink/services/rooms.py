# swiftlink/services/rooms.py
from __future__ import annotations

import logging
from typing import Dict, List, Set

logger = logging.getLogger("swiftlink.rooms")

USER_ROOM_PREFIX = "user:"
AGENT_ROOM_PREFIX = "agent:"


def user_room(user_id: str) -> str:
    return f"{USER_ROOM_PREFIX}{user_id}"


def agent_room(agent_id: str) -> str:
    return f"{AGENT_ROOM_PREFIX}{agent_id}"


class RoomRegistry:
    """
    Which socket sits in which room. Mirrors what the socket server's own
    manager tracks so fan-out can skip sockets that already got a copy.
    Only touched from the event loop, so no lock.
    """

    def __init__(self) -> None:
        self._members: Dict[str, Set[str]] = {}
        self._rooms_of: Dict[str, Set[str]] = {}

    def join(self, sid: str, room: str) -> None:
        self._members.setdefault(room, set()).add(sid)
        self._rooms_of.setdefault(sid, set()).add(room)
        logger.info("rooms: join sid=%s room=%s members=%d", sid, room, len(self._members[room]))

    def leave(self, sid: str, room: str) -> bool:
        members = self._members.get(room)
        if not members or sid not in members:
            return False
        members.discard(sid)
        if not members:
            self._members.pop(room, None)
        rooms = self._rooms_of.get(sid)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                self._rooms_of.pop(sid, None)
        logger.info("rooms: leave sid=%s room=%s members=%d", sid, room, len(self._members.get(room, ())))
        return True

    def drop(self, sid: str) -> List[str]:
        """Forget a disconnected socket; returns the rooms it was in."""
        rooms = sorted(self._rooms_of.pop(sid, set()))
        for room in rooms:
            members = self._members.get(room)
            if members is None:
                continue
            members.discard(sid)
            if not members:
                self._members.pop(room, None)
        return rooms

    def members(self, room: str) -> Set[str]:
        return set(self._members.get(room, ()))

    def rooms_of(self, sid: str) -> Set[str]:
        return set(self._rooms_of.get(sid, ()))

    def stats(self) -> Dict[str, int]:
        """Member counts per room (live)."""
        per = {room: len(sids) for room, sids in self._members.items()}
        per["__total__"] = len(self._rooms_of)
        return per
