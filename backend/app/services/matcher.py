from __future__ import annotations

import re
from collections.abc import Iterable

from app.errors import NotFoundError
from app.schemas.job import ACTIVE_JOB_STATUSES, JobRecord
from app.schemas.user import ROLE_WORKER
from app.storage.base import Storage


class JobMatcher:
    """Recall-oriented skill filter: a job matches when it shares at least one
    skill tag with the worker. There is no scoring or ranking; results keep
    store order.
    """

    def __init__(self, storage: Storage, skill_aliases: dict[str, str] | None = None) -> None:
        self.storage = storage
        self.skill_aliases = dict(skill_aliases or {})

    def match_jobs(self, worker_id: int) -> list[JobRecord]:
        worker = self.storage.get_user(worker_id)
        if worker is None or worker.role != ROLE_WORKER:
            raise NotFoundError("Worker not found")

        profile = self.storage.get_worker_profile(worker_id)
        if profile is None:
            return []

        worker_skills = self._normalize_set(profile.skills)
        if not worker_skills:
            return []

        return [
            job
            for job in self.storage.list_jobs()
            if job.status in ACTIVE_JOB_STATUSES and worker_skills & self._normalize_set(job.skills)
        ]

    def matched_skills(self, worker_skills: Iterable[str], job_skills: Iterable[str]) -> list[str]:
        return sorted(self._normalize_set(worker_skills) & self._normalize_set(job_skills))

    def _normalize_set(self, values: Iterable[str]) -> set[str]:
        return {token for token in (self._normalize_token(value) for value in values) if token}

    def _normalize_token(self, value: str) -> str:
        token = value.strip().lower()
        token = re.sub(r"\s+", " ", token)
        return self.skill_aliases.get(token, token)
