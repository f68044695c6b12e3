# swiftlink/client/agent_chat.py
"""
Agent chat screen without the screen: roster on the left, one open
conversation on the right, a text input and a send control.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from swiftlink.client.connection import RelayConnection
from swiftlink.models import chat as chat_models
from swiftlink.models.chat import now_iso, sort_roster, sort_transcript

logger = logging.getLogger("swiftlink.client.agent_chat")

LISTENED_EVENTS = (
    chat_models.EV_USERS_LIST,
    chat_models.EV_LOAD_MESSAGES,
    chat_models.EV_RECEIVE_MESSAGE,
    chat_models.EV_NEW_USER_MESSAGE,
)


@dataclass(frozen=True)
class NoSelection:
    pass


@dataclass(frozen=True)
class Selected:
    entry: dict

    @property
    def user_id(self) -> str:
        return str(self.entry["userId"])


Selection = Union[NoSelection, Selected]
NO_SELECTION = NoSelection()


class AgentChatSession:
    def __init__(
        self,
        connection: RelayConnection,
        agent_id: Optional[str],
        clock: Callable[[], str] = now_iso,
    ):
        self.connection = connection
        self.agent_id = agent_id
        self._clock = clock

        self.users: List[dict] = []
        self.selection: Selection = NO_SELECTION
        self.messages: List[dict] = []
        self.input: str = ""

    # ------------------------------ state -------------------------------------

    @property
    def selected_user(self) -> Optional[dict]:
        return self.selection.entry if isinstance(self.selection, Selected) else None

    @property
    def can_send(self) -> bool:
        return bool(self.input.strip()) and isinstance(self.selection, Selected)

    def set_input(self, text: str) -> None:
        self.input = text

    def _is_selected(self, msg: dict) -> bool:
        return isinstance(self.selection, Selected) and str(msg.get("userId")) == self.selection.user_id

    # ------------------------------ lifecycle ---------------------------------

    async def mount(self) -> None:
        await self.connection.open()
        logger.info("Agent connected: %s", self.agent_id or "No Agent ID")

        self.connection.on(chat_models.EV_USERS_LIST, self.on_users_list)
        self.connection.on(chat_models.EV_LOAD_MESSAGES, self.on_load_messages)
        self.connection.on(chat_models.EV_RECEIVE_MESSAGE, self.on_receive_message)
        self.connection.on(chat_models.EV_NEW_USER_MESSAGE, self.on_new_user_message)

        await self.connection.emit(chat_models.EV_GET_USERS, self.agent_id)

    async def unmount(self) -> None:
        for event in LISTENED_EVENTS:
            self.connection.off(event)
        await self.connection.close()
        logger.info("Agent disconnected: %s", self.agent_id or "No Agent ID")

    # ------------------------------ actions -----------------------------------

    async def select_user(self, entry: dict) -> None:
        if isinstance(self.selection, Selected):
            await self.connection.emit(chat_models.EV_LEAVE_ROOM, self.selection.user_id)
        self.selection = Selected(entry)
        # history for the new room arrives via loadMessages
        self.messages = []
        await self.connection.emit(chat_models.EV_JOIN_ROOM, str(entry["userId"]))

    async def send(self) -> Optional[dict]:
        sel = self.selection
        if not self.can_send or not isinstance(sel, Selected):
            return None

        data = {
            "userId": sel.user_id,
            "agentId": self.agent_id,
            "sentBy": chat_models.SENT_BY_AGENT,
            "message": self.input.strip(),
        }
        await self.connection.emit(chat_models.EV_SEND_MESSAGE, data)
        self.input = ""
        local = {**data, "createdAt": self._clock()}
        self.messages = [*self.messages, local]
        return local

    # ------------------------------ server events -----------------------------

    def on_users_list(self, users: list) -> None:
        self.users = sort_roster(list(users or []))

    def on_load_messages(self, messages: list) -> None:
        self.messages = sort_transcript(list(messages or []))

    async def on_receive_message(self, msg: dict) -> None:
        # user messages for the open room skip the inbox event, refresh here
        if msg.get("sentBy") == chat_models.SENT_BY_USER:
            await self.connection.emit(chat_models.EV_GET_USERS, self.agent_id)
        if self._is_selected(msg):
            self.messages = [*self.messages, msg]

    async def on_new_user_message(self, msg: dict) -> None:
        await self.connection.emit(chat_models.EV_GET_USERS, self.agent_id)
        if self._is_selected(msg):
            self.messages = [*self.messages, msg]
