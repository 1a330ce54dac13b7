from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from barberin.core.clock import utcnow

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

APPOINTMENT_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED)


class Appointment(SQLModel, table=True):
    appointment_id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.user_id", index=True)
    barbershop_id: int = Field(foreign_key="barbershop.barbershop_id", index=True)
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.barber_id", index=True)
    service_id: Optional[int] = Field(default=None, foreign_key="service.service_id")

    appointment_date: date = Field(index=True)
    appointment_time: time

    # pending | confirmed | completed | cancelled
    status: str = Field(default=STATUS_PENDING, index=True)
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class AppointmentCreate(SQLModel):
    barbershop_id: Optional[int] = None
    barber_id: Optional[int] = None
    service_id: Optional[int] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    notes: Optional[str] = None


class AppointmentStatusUpdate(SQLModel):
    status: Optional[str] = None
