from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from barberin.core.clock import utcnow


class Service(SQLModel, table=True):
    service_id: Optional[int] = Field(default=None, primary_key=True)

    barbershop_id: int = Field(foreign_key="barbershop.barbershop_id", index=True)

    service_name: str
    description: Optional[str] = None
    price: float
    duration_minutes: int = 30
    is_active: bool = True

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class ServicePayload(SQLModel):
    service_name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration_minutes: Optional[int] = None
    is_active: Optional[bool] = None
