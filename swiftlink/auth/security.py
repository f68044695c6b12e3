import time
import logging
from typing import Optional

import bcrypt
import jwt

from swiftlink.core.config import SECRET_KEY, JWT_EXPIRE_MIN, JWT_ALGO

logger = logging.getLogger("swiftlink.auth")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        # malformed stored hash
        logger.warning("Password verification failed: %s", e)
        return False


def create_token(payload: dict) -> str:
    now = int(time.time())
    to_encode = {**payload, "iat": now, "exp": now + JWT_EXPIRE_MIN * 60}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGO)


def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGO])
    except jwt.PyJWTError as e:
        logger.warning("Token verification failed: %s", e)
        return None


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer ...` header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None
