from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from barberin.core.clock import utcnow


class BarbershopBase(SQLModel):
    name: str
    email: str = Field(index=True, unique=True)
    phone: Optional[str] = None
    address: str

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # responsável legal
    responsible_person: str
    id_document: str
    owner_phone: Optional[str] = None

    description: Optional[str] = None
    profile_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None


class Barbershop(BarbershopBase, table=True):
    barbershop_id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str

    # agregados das avaliações
    avg_rating: float = 0.0
    total_reviews: int = 0

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))


class BarbershopRegister(SQLModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    responsible_person: Optional[str] = None
    id_document: Optional[str] = None
    owner_phone: Optional[str] = None
    description: Optional[str] = None


class BarbershopUpdate(SQLModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    responsible_person: Optional[str] = None
    owner_phone: Optional[str] = None
    description: Optional[str] = None
    profile_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
