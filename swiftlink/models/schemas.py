# swiftlink/models/schemas.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "agent"]

EMAIL_PATTERN = r"^[\w\.+-]+@[\w\.-]+\.\w+$"  # Basic email validation


class RegisterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=160)
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, alias="fullName", max_length=160)
    role: Role = "user"


class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: Role = "user"


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    full_name: Optional[str] = Field(None, serialization_alias="fullName")
    role: Role
    is_active: bool = Field(True, serialization_alias="isActive")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    last_login: Optional[datetime] = Field(None, serialization_alias="lastLogin")
