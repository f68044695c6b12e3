from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from swiftlink.core.db import get_db
from swiftlink.services import chat_store

logger = logging.getLogger("swiftlink.api.health")
router = APIRouter()


@router.get("/ping")
def ping():
    logger.info("GET /health/ping")
    return {"ok": True}


@router.get("/store")
def store_health(db: Session = Depends(get_db)):
    s = chat_store.stats(db)
    logger.info("GET /health/store conversations=%d messages=%d", s["conversations"], s["messages"])
    return {"ok": True, **s}


@router.get("/relay")
def relay_health(request: Request):
    """
    Connected sockets and member counts per room (live).
    """
    relay = request.app.state.relay
    s = relay.stats()
    logger.info("GET /health/relay sockets=%d rooms=%d", s["sockets"], len(s["rooms"]))
    return {"ok": True, **s}


@router.get("/routes")
def list_routes(request: Request):
    out: List[Dict[str, Any]] = []
    for r in request.app.routes:
        path = getattr(r, "path", None)
        methods = getattr(r, "methods", None)
        if path and methods:
            out.append({"path": path, "methods": sorted(methods), "name": getattr(r, "name", None)})
    out.sort(key=lambda x: (x["path"], ",".join(x["methods"])))
    logger.info("GET /health/routes count=%d", len(out))
    return {"ok": True, "routes": out}
