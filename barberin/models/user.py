from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from barberin.core.clock import utcnow


class UserBase(SQLModel):
    first_name: str
    last_name: str
    email: str = Field(index=True, unique=True)
    phone: Optional[str] = None
    address: Optional[str] = None
    age_range: Optional[str] = None  # ex.: "18-25"
    profile_photo_url: Optional[str] = None


class User(UserBase, table=True):
    user_id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: Optional[str] = None  # None em contas só-Google
    google_id: Optional[str] = Field(default=None, index=True, unique=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))


# Corpos de requisição: tudo opcional, o router nomeia cada campo faltante

class UserRegister(SQLModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    address: Optional[str] = None
    age_range: Optional[str] = None


class UserUpdate(SQLModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    age_range: Optional[str] = None
    profile_photo_url: Optional[str] = None


class LoginRequest(SQLModel):
    email: Optional[str] = None
    password: Optional[str] = None
