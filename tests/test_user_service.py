from uuid import uuid4

import pytest

from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from app.core.security import verify_token
from app.schemas.auth import RegisterRequest
from app.schemas.profile import ProfileUpdate
from app.services.application_service import ApplicationService
from app.services.user_service import UserService
from app.utils.constants import Role

from factories import PASSWORD, identity


def registration(**overrides) -> RegisterRequest:
    data = {
        "email": "new@uni.edu",
        "password": "long-enough-password",
        "first_name": "Amina",
        "last_name": "Khan",
    }
    data.update(overrides)
    return RegisterRequest(**data)


@pytest.fixture
def service(db):
    return UserService(db)


async def test_register_creates_user_and_profile(service):
    user = await service.register(registration())

    assert user.role == Role.STUDENT.value
    assert user.profile.first_name == "Amina"
    assert user.password_hash != "long-enough-password"


async def test_register_duplicate_email(service):
    await service.register(registration())

    with pytest.raises(DuplicateError):
        await service.register(registration())


async def test_register_rejects_admin_and_unknown_roles(service):
    with pytest.raises(InvalidInputError):
        await service.register(registration(role="ADMIN"))
    with pytest.raises(InvalidInputError):
        await service.register(registration(role="RECRUITER"))


async def test_login_issues_token_for_stored_role(service, employer):
    user, token = await service.login(employer.email, PASSWORD)

    claims = verify_token(token)
    assert user.id == employer.id
    assert claims.user_id == employer.id
    assert claims.role == Role.EMPLOYER


async def test_login_wrong_password(service, employer):
    with pytest.raises(AuthenticationError):
        await service.login(employer.email, "not-the-password")


async def test_login_unknown_email(service):
    with pytest.raises(AuthenticationError):
        await service.login("ghost@uni.edu", PASSWORD)


async def test_profile_partial_update(service, student):
    profile = await service.update_profile(
        identity(student), ProfileUpdate(phone="+92 300 0000000", certificate_url=None)
    )

    assert profile.phone == "+92 300 0000000"
    assert profile.certificate_url is None
    assert profile.resume_url == "https://files.test/resume.pdf"
    assert profile.mbti_type == "INTJ"


async def test_profile_null_name_is_ignored(service, student):
    profile = await service.update_profile(identity(student), ProfileUpdate(first_name=None))
    assert profile.first_name == "Test"


async def test_clearing_mbti_type_resets_completion(service, student):
    profile = await service.update_profile(identity(student), ProfileUpdate(mbti_type=None))

    assert profile.mbti_type is None
    assert profile.mbti_completed is False


async def test_admin_changes_role(service, admin, student):
    user = await service.change_role(student.id, "EMPLOYER", identity(admin))
    assert user.role == Role.EMPLOYER.value


async def test_admin_cannot_change_own_role(service, admin):
    with pytest.raises(ConflictError):
        await service.change_role(admin.id, "STUDENT", identity(admin))


async def test_change_role_validates_label(service, admin, student):
    with pytest.raises(InvalidInputError):
        await service.change_role(student.id, "OWNER", identity(admin))


async def test_change_role_unknown_user(service, admin):
    with pytest.raises(NotFoundError):
        await service.change_role(uuid4(), "EMPLOYER", identity(admin))


async def test_employer_cannot_change_roles(service, employer, student):
    with pytest.raises(PermissionDeniedError):
        await service.change_role(student.id, "ADMIN", identity(employer))


async def test_delete_user_removes_applications(db, service, admin, student, job):
    await ApplicationService(db).create(identity(student), job.id)
    student_id = student.id

    await service.delete_user(student_id, identity(admin))

    assert await service.users.find_by_id(student_id) is None
    assert await service.profiles.find_by_user_id(student_id) is None
    assert await ApplicationService(db).applications.count() == 0


async def test_admin_cannot_delete_self(service, admin):
    with pytest.raises(ConflictError):
        await service.delete_user(admin.id, identity(admin))


async def test_delete_posting_owner_is_conflict(service, admin, employer, job):
    with pytest.raises(ConflictError):
        await service.delete_user(employer.id, identity(admin))


async def test_user_detail_lists_applications(db, service, admin, student, job):
    await ApplicationService(db).create(identity(student), job.id)

    user = await service.get_user_detail(student.id, identity(admin))

    assert [a.job_posting.id for a in user.applications] == [job.id]
