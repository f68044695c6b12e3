# swiftlink/middleware/request_logger.py
import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("swiftlink.http")


class RequestLoggerMiddleware:
    """
    Logs every HTTP request with method, path, status and duration.
    Socket.IO polling requests never reach this app (the socket server
    answers them first), so only REST traffic shows up here.
    """
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.time()
        method = scope.get("method", "-")
        path = scope.get("path", "-")
        status = {"code": 500}

        async def send_wrapper(message: Message):
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
            await send(message)

        logger.info("[HTTP >] %s %s", method, path)
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            dur_ms = (time.time() - start) * 1000
            logger.info("[HTTP <] %s %s status=%d done in %.1fms", method, path, status["code"], dur_ms)
