from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import Base
from app.errors import DuplicateError
from app.models.application import Application
from app.models.employer_profile import EmployerProfile
from app.models.job import Job
from app.models.message import Message
from app.models.notification import Notification
from app.models.rating import Rating
from app.models.user import User
from app.models.worker_profile import WorkerProfile
from app.schemas.application import APP_PENDING, ApplicationRecord
from app.schemas.job import JOB_OPEN, JobRecord
from app.schemas.message import MessageRecord, NotificationRecord
from app.schemas.rating import RatingRecord
from app.schemas.user import EmployerProfileRecord, UserRecord, WorkerProfileRecord
from app.storage.base import Fields, Storage, utcnow


RecordT = TypeVar("RecordT", bound=BaseModel)


def _snapshot(model: type[RecordT], row: Base | None) -> RecordT | None:
    if row is None:
        return None
    return model.model_validate(row)


class SqlStorage(Storage):
    """SQLAlchemy-backed store; one instance wraps one session.

    Each write commits on its own, so every call is atomic per entity.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _add(self, model: type[RecordT], row: Base) -> RecordT:
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return model.model_validate(row)

    def _patch(self, model: type[RecordT], row: Base | None, fields: Fields) -> RecordT | None:
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return model.model_validate(row)

    # Users
    def get_user(self, user_id: int) -> UserRecord | None:
        return _snapshot(UserRecord, self.db.get(User, user_id))

    def get_user_by_username(self, username: str) -> UserRecord | None:
        return _snapshot(UserRecord, self.db.query(User).filter(User.username == username).first())

    def get_user_by_email(self, email: str) -> UserRecord | None:
        return _snapshot(UserRecord, self.db.query(User).filter(User.email == email).first())

    def create_user(self, fields: Fields) -> UserRecord:
        row = User(rating=0.0, is_verified=False, created_at=utcnow(), **fields)
        try:
            return self._add(UserRecord, row)
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateError("Username or email already exists", fields=["username", "email"]) from exc

    def update_user(self, user_id: int, fields: Fields) -> UserRecord | None:
        return self._patch(UserRecord, self.db.get(User, user_id), fields)

    def list_users_by_role(self, role: str) -> list[UserRecord]:
        rows = self.db.query(User).filter(User.role == role).order_by(User.id.asc()).all()
        return [UserRecord.model_validate(row) for row in rows]

    # Profiles
    def _worker_profile_row(self, user_id: int) -> WorkerProfile | None:
        return self.db.query(WorkerProfile).filter(WorkerProfile.user_id == user_id).first()

    def _employer_profile_row(self, user_id: int) -> EmployerProfile | None:
        return self.db.query(EmployerProfile).filter(EmployerProfile.user_id == user_id).first()

    def get_worker_profile(self, user_id: int) -> WorkerProfileRecord | None:
        return _snapshot(WorkerProfileRecord, self._worker_profile_row(user_id))

    def create_worker_profile(self, fields: Fields) -> WorkerProfileRecord:
        try:
            return self._add(WorkerProfileRecord, WorkerProfile(**fields))
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateError("Profile already exists") from exc

    def update_worker_profile(self, user_id: int, fields: Fields) -> WorkerProfileRecord | None:
        return self._patch(WorkerProfileRecord, self._worker_profile_row(user_id), fields)

    def get_employer_profile(self, user_id: int) -> EmployerProfileRecord | None:
        return _snapshot(EmployerProfileRecord, self._employer_profile_row(user_id))

    def create_employer_profile(self, fields: Fields) -> EmployerProfileRecord:
        try:
            return self._add(EmployerProfileRecord, EmployerProfile(**fields))
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateError("Profile already exists") from exc

    def update_employer_profile(self, user_id: int, fields: Fields) -> EmployerProfileRecord | None:
        return self._patch(EmployerProfileRecord, self._employer_profile_row(user_id), fields)

    # Jobs
    def get_job(self, job_id: int) -> JobRecord | None:
        return _snapshot(JobRecord, self.db.get(Job, job_id))

    def list_jobs(self) -> list[JobRecord]:
        return [JobRecord.model_validate(row) for row in self.db.query(Job).order_by(Job.id.asc()).all()]

    def list_jobs_by_employer(self, employer_id: int) -> list[JobRecord]:
        rows = self.db.query(Job).filter(Job.employer_id == employer_id).order_by(Job.id.asc()).all()
        return [JobRecord.model_validate(row) for row in rows]

    def create_job(self, fields: Fields) -> JobRecord:
        values = {"status": JOB_OPEN, "created_at": utcnow(), **fields}
        return self._add(JobRecord, Job(**values))

    def update_job(self, job_id: int, fields: Fields) -> JobRecord | None:
        return self._patch(JobRecord, self.db.get(Job, job_id), fields)

    def delete_job(self, job_id: int) -> bool:
        job = self.db.get(Job, job_id)
        if job is None:
            return False
        self.db.query(Application).filter(Application.job_id == job_id).delete(synchronize_session=False)
        self.db.delete(job)
        self.db.commit()
        return True

    # Applications
    def get_application(self, application_id: int) -> ApplicationRecord | None:
        return _snapshot(ApplicationRecord, self.db.get(Application, application_id))

    def get_application_by_job_and_worker(self, job_id: int, worker_id: int) -> ApplicationRecord | None:
        row = (
            self.db.query(Application)
            .filter(Application.job_id == job_id, Application.worker_id == worker_id)
            .first()
        )
        return _snapshot(ApplicationRecord, row)

    def list_applications_by_worker(self, worker_id: int) -> list[ApplicationRecord]:
        rows = self.db.query(Application).filter(Application.worker_id == worker_id).order_by(Application.id.asc()).all()
        return [ApplicationRecord.model_validate(row) for row in rows]

    def list_applications_by_job(self, job_id: int) -> list[ApplicationRecord]:
        rows = self.db.query(Application).filter(Application.job_id == job_id).order_by(Application.id.asc()).all()
        return [ApplicationRecord.model_validate(row) for row in rows]

    def list_applications_by_employer(self, employer_id: int) -> list[ApplicationRecord]:
        rows = (
            self.db.query(Application)
            .join(Job, Job.id == Application.job_id)
            .filter(Job.employer_id == employer_id)
            .order_by(Application.id.asc())
            .all()
        )
        return [ApplicationRecord.model_validate(row) for row in rows]

    def create_application(self, fields: Fields) -> ApplicationRecord:
        now = utcnow()
        values = {"status": APP_PENDING, "applied_at": now, "updated_at": now, **fields}
        try:
            return self._add(ApplicationRecord, Application(**values))
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateError("An application for this job already exists", fields=["job_id"]) from exc

    def update_application(self, application_id: int, fields: Fields) -> ApplicationRecord | None:
        row = self.db.get(Application, application_id)
        return self._patch(ApplicationRecord, row, {**fields, "updated_at": utcnow()})

    # Ratings
    def create_rating(self, fields: Fields) -> RatingRecord:
        return self._add(RatingRecord, Rating(created_at=utcnow(), **fields))

    def list_ratings_by_recipient(self, user_id: int) -> list[RatingRecord]:
        rows = self.db.query(Rating).filter(Rating.to_user_id == user_id).order_by(Rating.id.asc()).all()
        return [RatingRecord.model_validate(row) for row in rows]

    # Messages
    def create_message(self, fields: Fields) -> MessageRecord:
        return self._add(MessageRecord, Message(is_read=False, created_at=utcnow(), **fields))

    def get_message(self, message_id: int) -> MessageRecord | None:
        return _snapshot(MessageRecord, self.db.get(Message, message_id))

    def list_messages_by_user(self, user_id: int) -> list[MessageRecord]:
        rows = (
            self.db.query(Message)
            .filter(or_(Message.from_user_id == user_id, Message.to_user_id == user_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .all()
        )
        return [MessageRecord.model_validate(row) for row in rows]

    def list_conversation(self, user_a: int, user_b: int) -> list[MessageRecord]:
        rows = (
            self.db.query(Message)
            .filter(
                or_(
                    and_(Message.from_user_id == user_a, Message.to_user_id == user_b),
                    and_(Message.from_user_id == user_b, Message.to_user_id == user_a),
                )
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )
        return [MessageRecord.model_validate(row) for row in rows]

    def mark_message_read(self, message_id: int) -> MessageRecord | None:
        return self._patch(MessageRecord, self.db.get(Message, message_id), {"is_read": True})

    # Notifications
    def create_notification(self, fields: Fields) -> NotificationRecord:
        return self._add(NotificationRecord, Notification(is_read=False, created_at=utcnow(), **fields))

    def get_notification(self, notification_id: int) -> NotificationRecord | None:
        return _snapshot(NotificationRecord, self.db.get(Notification, notification_id))

    def list_notifications_by_user(self, user_id: int) -> list[NotificationRecord]:
        rows = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )
        return [NotificationRecord.model_validate(row) for row in rows]

    def mark_notification_read(self, notification_id: int) -> NotificationRecord | None:
        return self._patch(NotificationRecord, self.db.get(Notification, notification_id), {"is_read": True})
