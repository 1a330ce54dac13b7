from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from barberin.core.clock import utcnow

MIN_RATING = 1
MAX_RATING = 5


class Review(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "barbershop_id"),)

    review_id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.user_id", index=True)
    barbershop_id: int = Field(foreign_key="barbershop.barbershop_id", index=True)

    rating: int
    comment: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class ReviewCreate(SQLModel):
    barbershop_id: Optional[int] = None
    rating: Optional[int] = None
    comment: Optional[str] = None
