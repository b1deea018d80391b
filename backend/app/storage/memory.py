from __future__ import annotations

import itertools
import threading
from collections.abc import Callable, Iterable
from typing import TypeVar

from pydantic import BaseModel

from app.errors import DuplicateError
from app.schemas.application import APP_PENDING, ApplicationRecord
from app.schemas.job import JOB_OPEN, JobRecord
from app.schemas.message import MessageRecord, NotificationRecord
from app.schemas.rating import RatingRecord
from app.schemas.user import EmployerProfileRecord, UserRecord, WorkerProfileRecord
from app.storage.base import Fields, Storage, utcnow


RecordT = TypeVar("RecordT", bound=BaseModel)


def _newest_first(records: Iterable[RecordT]) -> list[RecordT]:
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


def _oldest_first(records: Iterable[RecordT]) -> list[RecordT]:
    return sorted(records, key=lambda r: (r.created_at, r.id))


class _Table:
    def __init__(self) -> None:
        self.rows: dict[int, BaseModel] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)


class MemoryStorage(Storage):
    """Dict-backed store used by tests and the ``memory`` backend.

    Records are frozen, so handing them out never exposes internal state;
    updates replace the stored record with a copy.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users = _Table()
        self._worker_profiles = _Table()
        self._employer_profiles = _Table()
        self._jobs = _Table()
        self._applications = _Table()
        self._ratings = _Table()
        self._messages = _Table()
        self._notifications = _Table()

    def _insert(self, table: _Table, model: type[RecordT], fields: Fields) -> RecordT:
        with self._lock:
            record = model.model_validate({**fields, "id": table.next_id()})
            table.rows[record.id] = record
            return record

    def _update(self, table: _Table, key: int, fields: Fields) -> BaseModel | None:
        with self._lock:
            current = table.rows.get(key)
            if current is None:
                return None
            updated = current.model_validate({**current.model_dump(), **fields})
            table.rows[key] = updated
            return updated

    def _select(self, table: _Table, predicate: Callable[[BaseModel], bool]) -> list:
        with self._lock:
            return [row for row in table.rows.values() if predicate(row)]

    # Users
    def get_user(self, user_id: int) -> UserRecord | None:
        return self._users.rows.get(user_id)

    def get_user_by_username(self, username: str) -> UserRecord | None:
        found = self._select(self._users, lambda u: u.username == username)
        return found[0] if found else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        found = self._select(self._users, lambda u: u.email == email)
        return found[0] if found else None

    def create_user(self, fields: Fields) -> UserRecord:
        with self._lock:
            if self.get_user_by_username(fields["username"]) or self.get_user_by_email(fields["email"]):
                raise DuplicateError("Username or email already exists", fields=["username", "email"])
            return self._insert(
                self._users,
                UserRecord,
                {"rating": 0.0, "is_verified": False, "created_at": utcnow(), **fields},
            )

    def update_user(self, user_id: int, fields: Fields) -> UserRecord | None:
        return self._update(self._users, user_id, fields)

    def list_users_by_role(self, role: str) -> list[UserRecord]:
        return self._select(self._users, lambda u: u.role == role)

    # Profiles
    def get_worker_profile(self, user_id: int) -> WorkerProfileRecord | None:
        found = self._select(self._worker_profiles, lambda p: p.user_id == user_id)
        return found[0] if found else None

    def create_worker_profile(self, fields: Fields) -> WorkerProfileRecord:
        with self._lock:
            if self.get_worker_profile(fields["user_id"]):
                raise DuplicateError("Profile already exists")
            return self._insert(self._worker_profiles, WorkerProfileRecord, fields)

    def update_worker_profile(self, user_id: int, fields: Fields) -> WorkerProfileRecord | None:
        with self._lock:
            profile = self.get_worker_profile(user_id)
            if profile is None:
                return None
            return self._update(self._worker_profiles, profile.id, fields)

    def get_employer_profile(self, user_id: int) -> EmployerProfileRecord | None:
        found = self._select(self._employer_profiles, lambda p: p.user_id == user_id)
        return found[0] if found else None

    def create_employer_profile(self, fields: Fields) -> EmployerProfileRecord:
        with self._lock:
            if self.get_employer_profile(fields["user_id"]):
                raise DuplicateError("Profile already exists")
            return self._insert(self._employer_profiles, EmployerProfileRecord, fields)

    def update_employer_profile(self, user_id: int, fields: Fields) -> EmployerProfileRecord | None:
        with self._lock:
            profile = self.get_employer_profile(user_id)
            if profile is None:
                return None
            return self._update(self._employer_profiles, profile.id, fields)

    # Jobs
    def get_job(self, job_id: int) -> JobRecord | None:
        return self._jobs.rows.get(job_id)

    def list_jobs(self) -> list[JobRecord]:
        return self._select(self._jobs, lambda j: True)

    def list_jobs_by_employer(self, employer_id: int) -> list[JobRecord]:
        return self._select(self._jobs, lambda j: j.employer_id == employer_id)

    def create_job(self, fields: Fields) -> JobRecord:
        return self._insert(self._jobs, JobRecord, {"status": JOB_OPEN, "created_at": utcnow(), **fields})

    def update_job(self, job_id: int, fields: Fields) -> JobRecord | None:
        return self._update(self._jobs, job_id, fields)

    def delete_job(self, job_id: int) -> bool:
        with self._lock:
            if self._jobs.rows.pop(job_id, None) is None:
                return False
            for application in self.list_applications_by_job(job_id):
                del self._applications.rows[application.id]
            return True

    # Applications
    def get_application(self, application_id: int) -> ApplicationRecord | None:
        return self._applications.rows.get(application_id)

    def get_application_by_job_and_worker(self, job_id: int, worker_id: int) -> ApplicationRecord | None:
        found = self._select(self._applications, lambda a: a.job_id == job_id and a.worker_id == worker_id)
        return found[0] if found else None

    def list_applications_by_worker(self, worker_id: int) -> list[ApplicationRecord]:
        return self._select(self._applications, lambda a: a.worker_id == worker_id)

    def list_applications_by_job(self, job_id: int) -> list[ApplicationRecord]:
        return self._select(self._applications, lambda a: a.job_id == job_id)

    def list_applications_by_employer(self, employer_id: int) -> list[ApplicationRecord]:
        with self._lock:
            job_ids = {job.id for job in self.list_jobs_by_employer(employer_id)}
            return self._select(self._applications, lambda a: a.job_id in job_ids)

    def create_application(self, fields: Fields) -> ApplicationRecord:
        with self._lock:
            if self.get_application_by_job_and_worker(fields["job_id"], fields["worker_id"]):
                raise DuplicateError("An application for this job already exists", fields=["job_id"])
            now = utcnow()
            return self._insert(
                self._applications,
                ApplicationRecord,
                {"status": APP_PENDING, "applied_at": now, "updated_at": now, **fields},
            )

    def update_application(self, application_id: int, fields: Fields) -> ApplicationRecord | None:
        return self._update(self._applications, application_id, {**fields, "updated_at": utcnow()})

    # Ratings
    def create_rating(self, fields: Fields) -> RatingRecord:
        return self._insert(self._ratings, RatingRecord, {"created_at": utcnow(), **fields})

    def list_ratings_by_recipient(self, user_id: int) -> list[RatingRecord]:
        return self._select(self._ratings, lambda r: r.to_user_id == user_id)

    # Messages
    def create_message(self, fields: Fields) -> MessageRecord:
        return self._insert(self._messages, MessageRecord, {"is_read": False, "created_at": utcnow(), **fields})

    def get_message(self, message_id: int) -> MessageRecord | None:
        return self._messages.rows.get(message_id)

    def list_messages_by_user(self, user_id: int) -> list[MessageRecord]:
        return _newest_first(
            self._select(self._messages, lambda m: user_id in (m.from_user_id, m.to_user_id))
        )

    def list_conversation(self, user_a: int, user_b: int) -> list[MessageRecord]:
        pair = {user_a, user_b}
        return _oldest_first(
            self._select(self._messages, lambda m: {m.from_user_id, m.to_user_id} == pair)
        )

    def mark_message_read(self, message_id: int) -> MessageRecord | None:
        return self._update(self._messages, message_id, {"is_read": True})

    # Notifications
    def create_notification(self, fields: Fields) -> NotificationRecord:
        return self._insert(
            self._notifications,
            NotificationRecord,
            {"is_read": False, "created_at": utcnow(), **fields},
        )

    def get_notification(self, notification_id: int) -> NotificationRecord | None:
        return self._notifications.rows.get(notification_id)

    def list_notifications_by_user(self, user_id: int) -> list[NotificationRecord]:
        return _newest_first(self._select(self._notifications, lambda n: n.user_id == user_id))

    def mark_notification_read(self, notification_id: int) -> NotificationRecord | None:
        return self._update(self._notifications, notification_id, {"is_read": True})
