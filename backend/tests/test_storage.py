import pytest

from app.errors import DuplicateError


def test_duplicate_usernames_and_applications_are_refused(storage, make_user, make_job):
    employer = make_user("employer", username="acme")
    worker = make_user("worker")

    with pytest.raises(DuplicateError):
        make_user("employer", username="acme")

    job = make_job(employer.id)
    storage.create_application({"job_id": job.id, "worker_id": worker.id})
    with pytest.raises(DuplicateError):
        storage.create_application({"job_id": job.id, "worker_id": worker.id})

    # The store stays usable after a refused write.
    assert storage.get_user_by_username("acme").id == employer.id


def test_delete_job_removes_its_applications(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    doomed = make_job(employer.id)
    kept = make_job(employer.id)
    storage.create_application({"job_id": doomed.id, "worker_id": worker.id})
    survivor = storage.create_application({"job_id": kept.id, "worker_id": worker.id})

    assert storage.delete_job(doomed.id) is True
    assert storage.delete_job(doomed.id) is False
    assert storage.get_job(doomed.id) is None
    assert storage.list_applications_by_job(doomed.id) == []
    assert [a.id for a in storage.list_applications_by_worker(worker.id)] == [survivor.id]


def test_updates_return_fresh_records(storage, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer.id)
    application = storage.create_application({"job_id": job.id, "worker_id": worker.id})

    updated = storage.update_application(application.id, {"status": "interview"})

    assert application.status == "pending"
    assert updated.status == "interview"
    assert updated.updated_at >= application.updated_at
    assert storage.update_application(9999, {"status": "interview"}) is None
    assert storage.update_job(9999, {"title": "x"}) is None


def test_employer_application_listing_spans_their_jobs(storage, make_user, make_job):
    employer = make_user("employer")
    other = make_user("employer")
    worker = make_user("worker")
    mine = make_job(employer.id)
    theirs = make_job(other.id)
    own = storage.create_application({"job_id": mine.id, "worker_id": worker.id})
    storage.create_application({"job_id": theirs.id, "worker_id": worker.id})

    assert [a.id for a in storage.list_applications_by_employer(employer.id)] == [own.id]


def test_profiles_roundtrip(storage, make_user):
    worker = make_user("worker")
    employer = make_user("employer")

    storage.create_worker_profile({"user_id": worker.id, "skills": ["driving"], "experience": 3})
    storage.create_employer_profile({"user_id": employer.id, "company_name": "Acme", "industry": "Retail"})
    with pytest.raises(DuplicateError):
        storage.create_worker_profile({"user_id": worker.id, "skills": []})

    updated = storage.update_worker_profile(worker.id, {"skills": ["driving", "lifting"]})
    assert updated.skills == ["driving", "lifting"]
    assert storage.get_employer_profile(employer.id).company_name == "Acme"
    assert storage.update_employer_profile(worker.id, {"industry": "x"}) is None
    assert [u.id for u in storage.list_users_by_role("worker")] == [worker.id]
