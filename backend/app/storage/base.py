"""Persistence capability set consumed by the marketplace services.

Implementations return frozen pydantic records and accept plain field
mappings for writes, so callers never share mutable entity objects with the
store. Every method is atomic on its own; nothing here spans calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from app.schemas.application import ApplicationRecord
from app.schemas.job import JobRecord
from app.schemas.message import MessageRecord, NotificationRecord
from app.schemas.rating import RatingRecord
from app.schemas.user import EmployerProfileRecord, UserRecord, WorkerProfileRecord


Fields = Mapping[str, Any]


def utcnow() -> datetime:
    # Naive UTC so timestamps compare the same way in memory and in sqlite.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Storage(ABC):
    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> UserRecord | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> UserRecord | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> UserRecord | None: ...

    @abstractmethod
    def create_user(self, fields: Fields) -> UserRecord: ...

    @abstractmethod
    def update_user(self, user_id: int, fields: Fields) -> UserRecord | None: ...

    @abstractmethod
    def list_users_by_role(self, role: str) -> list[UserRecord]: ...

    # Profiles
    @abstractmethod
    def get_worker_profile(self, user_id: int) -> WorkerProfileRecord | None: ...

    @abstractmethod
    def create_worker_profile(self, fields: Fields) -> WorkerProfileRecord: ...

    @abstractmethod
    def update_worker_profile(self, user_id: int, fields: Fields) -> WorkerProfileRecord | None: ...

    @abstractmethod
    def get_employer_profile(self, user_id: int) -> EmployerProfileRecord | None: ...

    @abstractmethod
    def create_employer_profile(self, fields: Fields) -> EmployerProfileRecord: ...

    @abstractmethod
    def update_employer_profile(self, user_id: int, fields: Fields) -> EmployerProfileRecord | None: ...

    # Jobs
    @abstractmethod
    def get_job(self, job_id: int) -> JobRecord | None: ...

    @abstractmethod
    def list_jobs(self) -> list[JobRecord]: ...

    @abstractmethod
    def list_jobs_by_employer(self, employer_id: int) -> list[JobRecord]: ...

    @abstractmethod
    def create_job(self, fields: Fields) -> JobRecord: ...

    @abstractmethod
    def update_job(self, job_id: int, fields: Fields) -> JobRecord | None: ...

    @abstractmethod
    def delete_job(self, job_id: int) -> bool:
        """Delete the job and every application referencing it."""

    # Applications
    @abstractmethod
    def get_application(self, application_id: int) -> ApplicationRecord | None: ...

    @abstractmethod
    def get_application_by_job_and_worker(self, job_id: int, worker_id: int) -> ApplicationRecord | None: ...

    @abstractmethod
    def list_applications_by_worker(self, worker_id: int) -> list[ApplicationRecord]: ...

    @abstractmethod
    def list_applications_by_job(self, job_id: int) -> list[ApplicationRecord]: ...

    @abstractmethod
    def list_applications_by_employer(self, employer_id: int) -> list[ApplicationRecord]: ...

    @abstractmethod
    def create_application(self, fields: Fields) -> ApplicationRecord:
        """Insert an application; raises DuplicateError for an existing (job, worker) pair."""

    @abstractmethod
    def update_application(self, application_id: int, fields: Fields) -> ApplicationRecord | None:
        """Merge fields and refresh updated_at."""

    # Ratings
    @abstractmethod
    def create_rating(self, fields: Fields) -> RatingRecord: ...

    @abstractmethod
    def list_ratings_by_recipient(self, user_id: int) -> list[RatingRecord]: ...

    # Messages
    @abstractmethod
    def create_message(self, fields: Fields) -> MessageRecord: ...

    @abstractmethod
    def get_message(self, message_id: int) -> MessageRecord | None: ...

    @abstractmethod
    def list_messages_by_user(self, user_id: int) -> list[MessageRecord]:
        """Messages sent or received by the user, newest first."""

    @abstractmethod
    def list_conversation(self, user_a: int, user_b: int) -> list[MessageRecord]:
        """Messages exchanged between the pair, oldest first."""

    @abstractmethod
    def mark_message_read(self, message_id: int) -> MessageRecord | None: ...

    # Notifications
    @abstractmethod
    def create_notification(self, fields: Fields) -> NotificationRecord: ...

    @abstractmethod
    def get_notification(self, notification_id: int) -> NotificationRecord | None: ...

    @abstractmethod
    def list_notifications_by_user(self, user_id: int) -> list[NotificationRecord]:
        """Notifications owned by the user, newest first."""

    @abstractmethod
    def mark_notification_read(self, notification_id: int) -> NotificationRecord | None: ...
