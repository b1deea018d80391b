import pytest

from app.errors import NotFoundError
from app.services.matcher import JobMatcher


def test_matches_jobs_sharing_a_skill(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    storage.create_worker_profile({"user_id": worker.id, "skills": ["Forklift", "Inventory"]})

    forklift = make_job(employer.id, skills=["forklift"])
    make_job(employer.id, skills=["welding"])
    both = make_job(employer.id, skills=["inventory", "forklift"])

    matches = JobMatcher(storage).match_jobs(worker.id)

    assert [job.id for job in matches] == [forklift.id, both.id]


def test_normalizes_case_and_whitespace(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    storage.create_worker_profile({"user_id": worker.id, "skills": ["  Customer   Service "]})
    job = make_job(employer.id, skills=["customer service"])

    assert [j.id for j in JobMatcher(storage).match_jobs(worker.id)] == [job.id]


def test_skips_finished_jobs(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    storage.create_worker_profile({"user_id": worker.id, "skills": ["cleaning"]})
    open_job = make_job(employer.id, skills=["cleaning"])
    running = make_job(employer.id, skills=["cleaning"], status="in_progress")
    make_job(employer.id, skills=["cleaning"], status="completed")
    make_job(employer.id, skills=["cleaning"], status="cancelled")

    assert [j.id for j in JobMatcher(storage).match_jobs(worker.id)] == [open_job.id, running.id]


def test_no_profile_or_empty_skills_yields_nothing(storage, make_user, make_job):
    employer = make_user("employer")
    make_job(employer.id, skills=["cleaning"])
    without_profile = make_user("worker")
    empty = make_user("worker")
    storage.create_worker_profile({"user_id": empty.id, "skills": []})

    matcher = JobMatcher(storage)
    assert matcher.match_jobs(without_profile.id) == []
    assert matcher.match_jobs(empty.id) == []


def test_unknown_or_non_worker_raises(storage, make_user):
    employer = make_user("employer")
    matcher = JobMatcher(storage)

    with pytest.raises(NotFoundError):
        matcher.match_jobs(9999)
    with pytest.raises(NotFoundError):
        matcher.match_jobs(employer.id)


def test_skill_aliases_and_matched_skills(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    storage.create_worker_profile({"user_id": worker.id, "skills": ["JS", "Painting"]})
    job = make_job(employer.id, skills=["javascript"])

    matcher = JobMatcher(storage, skill_aliases={"js": "javascript"})

    assert [j.id for j in matcher.match_jobs(worker.id)] == [job.id]
    assert matcher.matched_skills(["JS", "Painting"], ["javascript", "painting "]) == ["javascript", "painting"]


def test_one_shared_skill_is_enough(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    storage.create_worker_profile({"user_id": worker.id, "skills": ["welding", "forklift"]})
    match = make_job(employer.id, skills=["forklift", "painting"])
    make_job(employer.id, skills=["painting", "drywall"])
    make_job(employer.id, skills=[])

    assert [j.id for j in JobMatcher(storage).match_jobs(worker.id)] == [match.id]
