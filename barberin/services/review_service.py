import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barberin.core.errors import ConflictError, NotFoundError
from barberin.models.review import Review
from barberin.services.barbershop_service import BarbershopService

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, session: Session):
        self.session = session

    def get_reviews_by_barbershop(self, barbershop_id: int) -> List[Review]:
        return self.session.exec(
            select(Review)
            .where(Review.barbershop_id == barbershop_id)
            .order_by(Review.created_at.desc())
        ).all()

    def create_review(self, user_id: int, data: dict) -> Review:
        barbershops = BarbershopService(self.session)
        barbershop_id = data["barbershop_id"]

        if not barbershops.get_barbershop_by_id(barbershop_id):
            raise NotFoundError("Barbershop not found")

        review = Review(**data, user_id=user_id)
        self.session.add(review)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Review for this barbershop already exists") from exc

        barbershops.refresh_rating(barbershop_id)
        self.session.refresh(review)
        logger.info("Review %s created for barbershop %s", review.review_id, barbershop_id)
        return review
