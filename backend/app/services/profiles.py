from __future__ import annotations

from app.errors import DuplicateError, ForbiddenError, NotFoundError
from app.schemas.user import (
    ROLE_EMPLOYER,
    ROLE_WORKER,
    EmployerProfileIn,
    EmployerProfileRecord,
    EmployerProfileUpdate,
    EmployerWithProfileOut,
    UserOut,
    WorkerProfileIn,
    WorkerProfileRecord,
    WorkerProfileUpdate,
    WorkerWithProfileOut,
)
from app.storage.base import Storage


class ProfileService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def list_workers(self) -> list[UserOut]:
        return [UserOut.model_validate(user.model_dump()) for user in self.storage.list_users_by_role(ROLE_WORKER)]

    def get_worker(self, user_id: int) -> WorkerWithProfileOut:
        user = self.storage.get_user(user_id)
        if user is None or user.role != ROLE_WORKER:
            raise NotFoundError("Worker not found")
        return WorkerWithProfileOut(**user.model_dump(), profile=self.storage.get_worker_profile(user_id))

    def get_employer(self, user_id: int) -> EmployerWithProfileOut:
        user = self.storage.get_user(user_id)
        if user is None or user.role != ROLE_EMPLOYER:
            raise NotFoundError("Employer not found")
        return EmployerWithProfileOut(**user.model_dump(), profile=self.storage.get_employer_profile(user_id))

    def get_worker_profile(self, user_id: int, role: str) -> WorkerProfileRecord:
        self._require(role, ROLE_WORKER)
        profile = self.storage.get_worker_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    def create_worker_profile(self, user_id: int, role: str, payload: WorkerProfileIn) -> WorkerProfileRecord:
        self._require(role, ROLE_WORKER)
        if self.storage.get_worker_profile(user_id) is not None:
            raise DuplicateError("Profile already exists. Use PUT to update.")
        return self.storage.create_worker_profile({**payload.model_dump(), "user_id": user_id})

    def update_worker_profile(self, user_id: int, role: str, payload: WorkerProfileUpdate) -> WorkerProfileRecord:
        self._require(role, ROLE_WORKER)
        profile = self.storage.update_worker_profile(user_id, payload.model_dump(exclude_unset=True))
        if profile is None:
            raise NotFoundError("Profile not found. Create a profile first.")
        return profile

    def get_employer_profile(self, user_id: int, role: str) -> EmployerProfileRecord:
        self._require(role, ROLE_EMPLOYER)
        profile = self.storage.get_employer_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    def create_employer_profile(self, user_id: int, role: str, payload: EmployerProfileIn) -> EmployerProfileRecord:
        self._require(role, ROLE_EMPLOYER)
        if self.storage.get_employer_profile(user_id) is not None:
            raise DuplicateError("Profile already exists. Use PUT to update.")
        return self.storage.create_employer_profile({**payload.model_dump(), "user_id": user_id})

    def update_employer_profile(
        self, user_id: int, role: str, payload: EmployerProfileUpdate
    ) -> EmployerProfileRecord:
        self._require(role, ROLE_EMPLOYER)
        changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
        profile = self.storage.update_employer_profile(user_id, changes)
        if profile is None:
            raise NotFoundError("Profile not found. Create a profile first.")
        return profile

    @staticmethod
    def _require(role: str, expected: str) -> None:
        if role != expected:
            raise ForbiddenError("Access denied")
