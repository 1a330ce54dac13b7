from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberin.core import responses
from barberin.core.security import TokenPayload, get_current_user
from barberin.core.validators import sanitize_string
from barberin.database import get_session
from barberin.models.review import MAX_RATING, MIN_RATING, ReviewCreate
from barberin.services.barbershop_service import BarbershopService
from barberin.services.review_service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.post("")
def create_review(
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: TokenPayload = Depends(get_current_user),
):
    errors = []
    if payload.barbershop_id is None:
        errors.append("Barbershop is required")
    if payload.rating is None or not MIN_RATING <= payload.rating <= MAX_RATING:
        errors.append(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    if errors:
        return responses.validation_error(errors)

    review = ReviewService(session).create_review(current_user.subject_id, {
        "barbershop_id": payload.barbershop_id,
        "rating": payload.rating,
        "comment": sanitize_string(payload.comment),
    })
    return responses.success({"review": review}, "Review created successfully", 201)


@router.get("/barbershop/{barbershop_id}")
def list_reviews(barbershop_id: int, session: Session = Depends(get_session)):
    barbershop = BarbershopService(session).get_barbershop_by_id(barbershop_id)
    if not barbershop:
        return responses.not_found("Barbershop not found")

    reviews = ReviewService(session).get_reviews_by_barbershop(barbershop_id)
    return responses.success(
        {
            "reviews": reviews,
            "avg_rating": barbershop.avg_rating,
            "total_reviews": barbershop.total_reviews,
        },
        "Reviews retrieved",
    )
