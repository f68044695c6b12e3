# swiftlink/client/auth_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from swiftlink.core.config import API_URL

logger = logging.getLogger("swiftlink.client.auth")

AGENT_HOME = "AgentChat"
USER_HOME = "UserChat"


class ApiAuthContext:
    """
    Login function backed by POST /api/auth/login. Keeps the token and the
    signed-in user, then sends the app to the role's home screen through
    `navigation.navigate(name, params)`.
    """

    def __init__(self, base_url: str = API_URL, session: Optional[requests.Session] = None, timeout: float = 12):
        self.base_url = base_url.rstrip("/")
        self.http = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/auth{path}"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def login(self, email: str, password: str, role: str, navigation: Any = None) -> Dict[str, Any]:
        resp = self.http.post(
            self._url("/login"),
            json={"email": email, "password": password, "role": role},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        self.token = data["token"]
        self.user = data["user"]
        logger.info("signed in email=%s role=%s", email, self.user.get("role"))

        if navigation is not None:
            if self.user.get("role") == "agent":
                navigation.navigate(AGENT_HOME, {"agentId": str(self.user["id"])})
            else:
                navigation.navigate(USER_HOME, {"userId": str(self.user["id"])})
        return data

    def me(self) -> Dict[str, Any]:
        resp = self.http.get(self._url("/me"), headers=self.auth_headers(), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()["user"]

    def logout(self) -> None:
        self.token = None
        self.user = None
