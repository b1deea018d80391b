from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.auth import get_current_user
from app.deps import get_rating_service
from app.schemas.rating import RatingCreate, RatingRecord
from app.schemas.user import UserRecord
from app.services.ratings import RatingService


router = APIRouter()


@router.post("", response_model=RatingRecord, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: RatingCreate,
    ratings: RatingService = Depends(get_rating_service),
    current_user: UserRecord = Depends(get_current_user),
) -> RatingRecord:
    return ratings.submit_rating(
        from_user_id=current_user.id,
        from_role=current_user.role,
        to_user_id=payload.to_user_id,
        value=payload.value,
        job_id=payload.job_id,
        review=payload.review,
    )
