# swiftlink/client/connection.py
from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from swiftlink.core.config import SOCKET_URL

logger = logging.getLogger("swiftlink.client.connection")

Handler = Callable[[Any], Union[None, Awaitable[None]]]


class RelayConnectionError(RuntimeError):
    """Raised when the relay cannot be reached or the handle is closed."""


class RelayConnection:
    """
    Handle to the chat relay. Nothing connects until open() is called and
    close() ends it; pass the handle to whatever needs the socket.

    No reconnection, no acks: events are fire-and-forget.
    """

    def __init__(self, url: str = SOCKET_URL, client: Optional[socketio.AsyncClient] = None):
        self.url = url
        self._client = client if client is not None else socketio.AsyncClient(reconnection=False)
        self._handlers: Dict[str, Handler] = {}
        self._wired: set[str] = set()

    @property
    def connected(self) -> bool:
        return bool(self._client.connected)

    async def open(self, auth: Optional[dict] = None) -> None:
        if self.connected:
            return
        try:
            await self._client.connect(self.url, auth=auth)
        except SocketConnectionError as e:
            logger.warning("relay connect failed url=%s err=%s", self.url, e)
            raise RelayConnectionError(f"cannot connect to {self.url}: {e}") from e
        logger.info("relay connected url=%s", self.url)

    async def close(self) -> None:
        if not self.connected:
            return
        await self._client.disconnect()
        logger.info("relay disconnected url=%s", self.url)

    async def emit(self, event: str, data: Any = None) -> None:
        if not self.connected:
            raise RelayConnectionError(f"emit {event!r} on a closed connection")
        logger.debug("emit event=%s", event)
        await self._client.emit(event, data)

    def on(self, event: str, handler: Handler) -> None:
        self._handlers[event] = handler
        if event not in self._wired:
            # one dispatcher per event; off() only has to drop the handler
            self._client.on(event, handler=self._dispatcher(event))
            self._wired.add(event)

    def off(self, event: str) -> None:
        self._handlers.pop(event, None)

    def _dispatcher(self, event: str) -> Callable[[Any], Awaitable[None]]:
        async def dispatch(data: Any = None) -> None:
            handler = self._handlers.get(event)
            if handler is None:
                logger.debug("drop event=%s (no handler)", event)
                return
            result = handler(data)
            if inspect.isawaitable(result):
                await result

        return dispatch
