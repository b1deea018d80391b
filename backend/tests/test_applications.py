import pytest

from app.errors import DuplicateError, ForbiddenError, IneligibleError, NotFoundError, ValidationError
from app.services.applications import ApplicationService


@pytest.fixture
def actors(make_user):
    return make_user("employer"), make_user("worker")


def test_submit_creates_pending_application(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)

    application = ApplicationService(storage).submit_application(
        worker.id, job.id, {"cover_letter": "I have done this before", "expected_rate": 22}
    )

    assert application.status == "pending"
    assert application.worker_id == worker.id
    assert application.expected_rate == 22
    assert application.applied_at is not None


def test_submit_rejects_duplicates(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)
    service = ApplicationService(storage)
    service.submit_application(worker.id, job.id, {})

    with pytest.raises(DuplicateError):
        service.submit_application(worker.id, job.id, {"cover_letter": "again"})
    assert len(storage.list_applications_by_job(job.id)) == 1


def test_submit_requires_worker_and_active_job(storage, actors, make_job):
    employer, worker = actors
    service = ApplicationService(storage)
    closed = make_job(employer.id, status="completed")
    job = make_job(employer.id)

    with pytest.raises(ForbiddenError):
        service.submit_application(employer.id, job.id, {})
    with pytest.raises(NotFoundError):
        service.submit_application(worker.id, 9999, {})
    with pytest.raises(IneligibleError):
        service.submit_application(worker.id, closed.id, {})


def test_submit_reports_invalid_fields(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)

    with pytest.raises(ValidationError) as excinfo:
        ApplicationService(storage).submit_application(worker.id, job.id, {"expected_rate": -5, "bogus": 1})

    assert excinfo.value.fields == ["bogus", "expected_rate"]


def test_employer_moves_status_forward(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)
    service = ApplicationService(storage)
    application = service.submit_application(worker.id, job.id, {})

    reviewed = service.update_application(employer.id, "employer", application.id, {"status": "under_review"})
    accepted = service.update_application(employer.id, "employer", application.id, {"status": "accepted"})

    assert reviewed.status == "under_review"
    assert accepted.status == "accepted"
    assert accepted.updated_at >= application.updated_at


def test_terminal_applications_are_frozen(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)
    service = ApplicationService(storage)
    application = service.submit_application(worker.id, job.id, {})
    service.update_application(employer.id, "employer", application.id, {"status": "rejected"})

    with pytest.raises(IneligibleError):
        service.update_application(employer.id, "employer", application.id, {"status": "accepted"})
    assert storage.get_application(application.id).status == "rejected"


def test_worker_may_only_edit_cover_letter(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)
    service = ApplicationService(storage)
    application = service.submit_application(worker.id, job.id, {})

    updated = service.update_application(worker.id, "worker", application.id, {"cover_letter": "Updated"})
    assert updated.cover_letter == "Updated"

    with pytest.raises(ForbiddenError) as excinfo:
        service.update_application(worker.id, "worker", application.id, {"status": "accepted"})
    assert excinfo.value.fields == ["status"]
    assert storage.get_application(application.id).status == "pending"


def test_other_employers_and_workers_are_refused(storage, actors, make_user, make_job):
    employer, worker = actors
    job = make_job(employer.id)
    service = ApplicationService(storage)
    application = service.submit_application(worker.id, job.id, {})

    with pytest.raises(ForbiddenError):
        service.update_application(make_user("employer").id, "employer", application.id, {"status": "accepted"})
    with pytest.raises(ForbiddenError):
        service.update_application(make_user("worker").id, "worker", application.id, {"cover_letter": "x"})
    with pytest.raises(NotFoundError):
        service.update_application(employer.id, "employer", 9999, {"status": "accepted"})


def test_update_rejects_unknown_and_invalid_fields(storage, actors, make_job):
    employer, worker = actors
    job = make_job(employer.id)
    service = ApplicationService(storage)
    application = service.submit_application(worker.id, job.id, {})

    with pytest.raises(ValidationError) as excinfo:
        service.update_application(employer.id, "employer", application.id, {"salary": 10})
    assert excinfo.value.fields == ["salary"]

    with pytest.raises(ValidationError):
        service.update_application(employer.id, "employer", application.id, {"status": "hired"})
    with pytest.raises(ValidationError):
        service.update_application(employer.id, "employer", application.id, {"status": None})


def test_listing_is_enriched_per_role(storage, actors, make_job):
    employer, worker = actors
    storage.create_employer_profile({"user_id": employer.id, "company_name": "Acme Logistics", "industry": "Shipping"})
    first = make_job(employer.id, title="Night shift", hourly_rate=25)
    second = make_job(employer.id, title="Day shift", hourly_rate=None)
    service = ApplicationService(storage)
    service.submit_application(worker.id, first.id, {})
    later = service.submit_application(worker.id, second.id, {"expected_rate": 18})

    worker_view = service.list_for_user(worker.id, "worker")
    assert [item.id for item in worker_view] == [later.id, later.id - 1]
    assert worker_view[0].job_title == "Day shift"
    assert worker_view[0].company_name == "Acme Logistics"
    assert worker_view[0].hourly_rate == 18
    assert worker_view[1].hourly_rate == 25
    assert worker_view[1].employer_id == employer.id

    employer_view = service.list_for_user(employer.id, "employer")
    assert {item.job.id for item in employer_view} == {first.id, second.id}
    assert all(item.worker.username == worker.username for item in employer_view)

    with pytest.raises(ForbiddenError):
        service.list_for_user(employer.id, "admin")
