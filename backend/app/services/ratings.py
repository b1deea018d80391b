from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from app.errors import DuplicateError, ForbiddenError, IneligibleError, NotFoundError, ValidationError
from app.logging_config import get_logger
from app.schemas.application import APP_ACCEPTED
from app.schemas.job import JOB_COMPLETED, JobRecord
from app.schemas.rating import MAX_RATING, MIN_RATING, RatingRecord
from app.schemas.user import ROLE_EMPLOYER, ROLE_WORKER, UserRecord
from app.storage.base import Storage


logger = get_logger(__name__)


def average_rating(values: list[int]) -> float | None:
    """Mean of the values rounded half-up to one decimal, or None when empty."""
    if not values:
        return None
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class RatingService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def submit_rating(
        self,
        from_user_id: int,
        from_role: str,
        to_user_id: int,
        value: int,
        job_id: int | None = None,
        review: str | None = None,
    ) -> RatingRecord:
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}", fields=["value"])
        if from_user_id == to_user_id:
            raise ValidationError("You cannot rate yourself", fields=["to_user_id"])

        recipient = self.storage.get_user(to_user_id)
        if recipient is None:
            raise NotFoundError("User not found")

        if job_id is not None:
            job = self.storage.get_job(job_id)
            if job is None:
                raise NotFoundError("Job not found")
            if job.status != JOB_COMPLETED:
                raise IneligibleError("Rating can only be given for completed jobs")
            self._check_participants(from_user_id, from_role, recipient, job)
            already_rated = any(
                rating.from_user_id == from_user_id and rating.job_id == job_id
                for rating in self.storage.list_ratings_by_recipient(to_user_id)
            )
            if already_rated:
                raise DuplicateError("You have already rated this user for this job")

        rating = self.storage.create_rating(
            {
                "from_user_id": from_user_id,
                "to_user_id": to_user_id,
                "job_id": job_id,
                "value": value,
                "review": review,
            }
        )
        # Not transactional with the insert: a failure here leaves a stale
        # average that the next rating corrects.
        updated = self.recompute_user_rating(to_user_id)
        logger.info(
            "rating_recorded",
            rating_id=rating.id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            job_id=job_id,
            average=updated.rating if updated else None,
        )
        return rating

    def recompute_user_rating(self, user_id: int) -> UserRecord | None:
        user = self.storage.get_user(user_id)
        if user is None:
            return None
        average = average_rating([rating.value for rating in self.storage.list_ratings_by_recipient(user_id)])
        if average is None:
            return user
        return self.storage.update_user(user_id, {"rating": average})

    def _check_participants(self, from_user_id: int, from_role: str, recipient: UserRecord, job: JobRecord) -> None:
        if from_role == ROLE_WORKER:
            if recipient.id != job.employer_id:
                raise ForbiddenError("You can only rate employers you worked for")
            if not self._is_accepted_worker(job.id, from_user_id):
                raise ForbiddenError("You did not work on this job")
            return

        if from_role == ROLE_EMPLOYER:
            if job.employer_id != from_user_id:
                raise ForbiddenError("You can only rate workers for your own jobs")
            if not self._is_accepted_worker(job.id, recipient.id):
                raise ForbiddenError("This worker did not work on this job")
            return

        raise ForbiddenError("Only job participants can rate each other")

    def _is_accepted_worker(self, job_id: int, worker_id: int) -> bool:
        application = self.storage.get_application_by_job_and_worker(job_id, worker_id)
        return application is not None and application.status == APP_ACCEPTED
