import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .security import bearer_token, create_token, hash_password, verify_password, verify_token
from swiftlink.core.db import get_db
from swiftlink.models.chat import utcnow
from swiftlink.models.orm import User
from swiftlink.models.schemas import LoginIn, RegisterIn, UserOut

# mounted under /api/auth by swiftlink.main
router = APIRouter(tags=["auth"])
logger = logging.getLogger("swiftlink.auth.routes")


def _user_out(user: User) -> dict:
    return UserOut.model_validate(user).model_dump(by_alias=True, mode="json")


def current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    token = bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")
    data = verify_token(token)
    if not data:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.get(User, int(data["sub"])) if str(data.get("sub", "")).isdigit() else None
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")
    return user


@router.post("/register", status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        logger.info("Register rejected for '%s' (email taken)", email)
        raise HTTPException(status_code=400, detail=f"Email '{email}' already exists")

    user = User(
        email=email,
        full_name=payload.full_name,
        hashed_password=hash_password(payload.password),
        role=payload.role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Registered '%s' (role=%s id=%s)", email, user.role, user.id)
    return {"user": _user_out(user)}


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(payload.password, user.hashed_password):
        logger.info("Login failed for '%s' (unknown email or bad password)", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if user.role != payload.role:
        logger.info("Login failed for '%s' (role %s requested, account is %s)", email, payload.role, user.role)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_active:
        logger.info("Login refused for '%s' (inactive)", email)
        raise HTTPException(status_code=403, detail="Account disabled")

    user.last_login = utcnow()
    db.commit()

    token = create_token({"sub": str(user.id), "email": user.email, "role": user.role})
    logger.info("Login success for '%s' (role=%s)", email, user.role)
    return {"token": token, "user": _user_out(user)}


@router.get("/me")
def me(user: User = Depends(current_user)):
    return {"user": _user_out(user)}
