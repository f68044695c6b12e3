from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

import socketio

from swiftlink.core.config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from swiftlink.core.db import create_all
from swiftlink.auth.routes import router as auth_router
from swiftlink.api import health
from swiftlink.api.relay import RelayServer, create_socket_server
from swiftlink.middleware.request_logger import RequestLoggerMiddleware

# ---- Logging config ---------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s:%(lineno)d - %(message)s",
)
logger = logging.getLogger("swiftlink.main")
logger.info("Starting SwiftLink backend with LOG_LEVEL=%s", LOG_LEVEL)

# ---- FastAPI app ------------------------------------------------------------
app = FastAPI(title="SwiftLink Backend")
app.add_middleware(RequestLoggerMiddleware)

# ---- CORS (permissive unless SWIFTLINK_CORS_ORIGINS narrows it) -------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    # browsers reject credentials with a wildcard origin
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Routers ----------------------------------------------------------------
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(health.router, prefix="/health", tags=["Health"])

logger.info("Routers registered.")

# ---- Socket relay -----------------------------------------------------------
sio = create_socket_server(CORS_ORIGINS)
relay = RelayServer(sio).register()
app.state.relay = relay

# one port for REST and socket traffic; /socket.io/* goes to the relay
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)


# ---- Startup ----------------------------------------------------------------
@app.on_event("startup")
def _startup() -> None:
    # Auto-create tables (safe to run repeatedly)
    create_all()
    logger.info("Startup completed.")


def run() -> None:
    import uvicorn

    logger.info("Server running on port %d", PORT)
    uvicorn.run(asgi_app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
