from datetime import timedelta
from uuid import uuid4

import pytest

from app.core.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from app.db.base import utcnow
from app.schemas.job import JobPostingCreate, JobPostingUpdate
from app.services.application_service import ApplicationService
from app.services.job_service import JobService
from app.utils.constants import JobStatus

from factories import identity, make_job


def posting(**overrides) -> dict:
    data = {
        "title": "Frontend Intern",
        "company": "Acme",
        "location": "Lahore",
        "description": "Ship UI features",
        "requirements": "HTML, CSS, TypeScript",
        "deadline": (utcnow() + timedelta(days=14)).isoformat(),
    }
    data.update(overrides)
    return data


@pytest.fixture
def service(db):
    return JobService(db)


async def test_create_starts_active_and_owned(service, employer):
    job = await service.create(identity(employer), JobPostingCreate(**posting(mbti_types="ENFP")))

    assert job.status == JobStatus.ACTIVE.value
    assert job.owner_id == employer.id
    assert job.mbti_types == "ENFP"


async def test_blank_optional_fields_become_null(service, employer):
    job = await service.create(identity(employer), JobPostingCreate(**posting(salary="  ", benefits="")))

    assert job.salary is None
    assert job.benefits is None


async def test_students_cannot_post_jobs(service, student):
    with pytest.raises(PermissionDeniedError):
        await service.create(identity(student), JobPostingCreate(**posting()))


async def test_list_mine_counts_applications(db, service, employer, other_employer, student, job):
    await make_job(db, other_employer, title="Not mine")
    await ApplicationService(db).create(identity(student), job.id)

    rows = await service.list_mine(identity(employer))

    assert [(j.id, count) for j, count in rows] == [(job.id, 1)]


async def test_update_keeps_unsent_optional_fields(service, employer):
    job = await service.create(
        identity(employer), JobPostingCreate(**posting(salary="50k", benefits="Health"))
    )

    updated = await service.update(
        job.id, JobPostingUpdate(**posting(title="Frontend Engineer", salary=None)), identity(employer)
    )

    assert updated.title == "Frontend Engineer"
    assert updated.salary is None
    assert updated.benefits == "Health"


async def test_update_by_non_owner_is_denied(service, other_employer, job):
    with pytest.raises(PermissionDeniedError):
        await service.update(job.id, JobPostingUpdate(**posting()), identity(other_employer))


async def test_admin_updates_any_posting(service, admin, job):
    updated = await service.update(job.id, JobPostingUpdate(**posting(status="INACTIVE")), identity(admin))
    assert updated.status == JobStatus.INACTIVE.value


async def test_toggle_status(service, employer, job):
    closed = await service.set_status(job.id, "INACTIVE", identity(employer))
    assert closed.status == JobStatus.INACTIVE.value

    reopened = await service.set_status(job.id, "ACTIVE", identity(employer))
    assert reopened.status == JobStatus.ACTIVE.value


async def test_toggle_status_rejects_unknown_label(service, employer, job):
    with pytest.raises(InvalidInputError):
        await service.set_status(job.id, "ARCHIVED", identity(employer))


async def test_get_unknown_posting_is_not_found(service, employer):
    with pytest.raises(NotFoundError):
        await service.get(uuid4(), identity(employer))


async def test_open_listing_hides_closed_and_expired(db, service, employer, student, job):
    await make_job(db, employer, title="Expired", deadline_in=timedelta(days=-2))
    await make_job(db, employer, title="Closed", status=JobStatus.INACTIVE)
    later = await make_job(db, employer, title="Later", deadline_in=timedelta(days=30))

    jobs, total = await service.list_open(identity(student))

    assert [j.id for j in jobs] == [job.id, later.id]
    assert total == 2


async def test_open_listing_total_counts_every_page(db, service, employer, student, job):
    await make_job(db, employer, title="Later", deadline_in=timedelta(days=30))
    await make_job(db, employer, title="Closed", status=JobStatus.INACTIVE)

    jobs, total = await service.list_open(identity(student), page=2, page_size=1)

    assert [j.title for j in jobs] == ["Later"]
    assert total == 2


async def test_count_active(db, service, employer, job):
    await make_job(db, employer, title="Closed", status=JobStatus.INACTIVE)

    assert await service.count_active(identity(employer)) == 1
