from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from barberin.core.clock import utcnow


class Barber(SQLModel, table=True):
    barber_id: Optional[int] = Field(default=None, primary_key=True)

    barbershop_id: int = Field(foreign_key="barbershop.barbershop_id", index=True)

    first_name: str
    last_name: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    is_active: bool = True

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class BarberPayload(SQLModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    is_active: Optional[bool] = None
