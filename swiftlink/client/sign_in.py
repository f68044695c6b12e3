# swiftlink/client/sign_in.py
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Optional

from swiftlink.core.config import ROLES

logger = logging.getLogger("swiftlink.client.sign_in")

# login(email, password, role, navigation), plain or async; raises on failure
LoginFn = Callable[[str, str, str, Any], Any]
AlertFn = Callable[[str, str], None]


def _log_alert(title: str, message: str) -> None:
    logger.warning("alert: %s: %s", title, message)


class SignInForm:
    """
    Email, password and a user/agent toggle. Real authentication is the
    injected login function's job; the form only guards empty fields and
    turns failures into an alert.
    """

    def __init__(self, login: LoginFn, navigation: Any = None, alert: Optional[AlertFn] = None):
        self._login = login
        self.navigation = navigation
        self.alert = alert or _log_alert

        self.email = ""
        self.password = ""
        self._role = "user"
        self.loading = False

    @property
    def role(self) -> str:
        return self._role

    @role.setter
    def role(self, value: str) -> None:
        if value not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got {value!r}")
        self._role = value

    async def submit(self) -> bool:
        """Returns True when login went through."""
        if not self.email or not self.password:
            self.alert("Error", "Please fill all fields")
            return False

        self.loading = True
        try:
            result = self._login(self.email, self.password, self.role, self.navigation)
            if inspect.isawaitable(result):
                await result
            return True
        except Exception:
            logger.exception("Login error email=%s role=%s", self.email, self.role)
            self.alert("Error", "An error occurred. Please try again.")
            return False
        finally:
            self.loading = False
