from datetime import timedelta

import pytest
from pydantic import ValidationError

from app.config import Settings, settings
from app.core.identity import authenticate
from app.core.security import create_access_token
from app.db.base import utcnow
from app.db.repositories import UserStore
from app.utils.constants import Role

from factories import PASSWORD, make_job, make_user


async def login(client, email, password=PASSWORD):
    client.cookies.clear()
    response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


def job_payload(**overrides):
    data = {
        "title": "Backend Intern",
        "company": "Acme",
        "location": "Karachi",
        "description": "Work on the API",
        "requirements": "Python",
        "deadline": (utcnow() + timedelta(days=7)).isoformat(),
        "mbti_types": "INTJ, ENTP",
    }
    data.update(overrides)
    return data


async def test_health(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "operational"


async def test_register_login_session_logout(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "fresh@uni.edu",
            "password": "long-enough-password",
            "first_name": "Bilal",
            "last_name": "Ahmed",
        },
    )
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "STUDENT"

    response = await login(client, "fresh@uni.edu", "long-enough-password")
    assert settings.AUTH_COOKIE_NAME in response.cookies
    assert "password_hash" not in response.json()["user"]

    session = await client.get("/api/v1/auth/session")
    assert session.json()["user"]["name"] == "Bilal Ahmed"

    await client.post("/api/v1/auth/logout")
    client.cookies.clear()
    session = await client.get("/api/v1/auth/session")
    assert session.status_code == 200
    assert session.json() == {"user": None}


async def test_duplicate_registration_is_409(client):
    body = {
        "email": "twice@uni.edu",
        "password": "long-enough-password",
        "first_name": "A",
        "last_name": "B",
    }
    assert (await client.post("/api/v1/auth/register", json=body)).status_code == 201
    response = await client.post("/api/v1/auth/register", json=body)
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE"


async def test_wrong_password_is_401(client, student):
    response = await client.post(
        "/api/v1/auth/login", json={"email": student.email, "password": "nope-nope-nope"}
    )
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"


async def test_protected_route_without_credential(client):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated", "code": "UNAUTHENTICATED"}


async def test_invalid_cookie_is_unauthenticated(client):
    client.cookies.set(settings.AUTH_COOKIE_NAME, "garbage")
    response = await client.get("/api/v1/profile")
    assert response.status_code == 401


async def test_bearer_header_also_works(client, employer):
    token = (await login(client, employer.email)).json()["access_token"]
    client.cookies.clear()

    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["role"] == "EMPLOYER"


async def test_missing_documents_reported(client, db, employer, job):
    await make_user(db, "nodocs@uni.edu", Role.STUDENT, resume_url="https://files.test/cv.pdf")
    await login(client, "nodocs@uni.edu")

    response = await client.post("/api/v1/applications", json={"job_posting_id": str(job.id)})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "MISSING_DOCUMENTS"
    assert body["missing_documents"] == ["certificate"]
    assert body["detail"] == "You must upload your certificate before applying"


async def test_student_cannot_reach_admin_console(client, student):
    await login(client, student.email)
    response = await client.get("/api/v1/admin/users")
    assert response.status_code == 403
    assert response.json()["code"] == "UNAUTHORIZED"


async def test_end_to_end_application_flow(client, student, employer, other_employer, admin):
    # Employer posts a job
    await login(client, employer.email)
    response = await client.post("/api/v1/employer/jobs", json=job_payload())
    assert response.status_code == 201
    job_id = response.json()["job"]["id"]
    assert response.json()["job"]["status"] == "ACTIVE"

    # Student applies
    await login(client, student.email)
    open_jobs = await client.get("/api/v1/jobs/open")
    assert [j["id"] for j in open_jobs.json()["jobs"]] == [job_id]

    response = await client.post("/api/v1/applications", json={"job_posting_id": job_id})
    assert response.status_code == 201
    application_id = response.json()["application_id"]
    assert response.json()["application"]["status"] == "PENDING"
    created_at = response.json()["application"]["updated_at"]

    response = await client.post("/api/v1/applications", json={"job_posting_id": job_id})
    assert response.status_code == 409

    mine = await client.get("/api/v1/applications/my")
    assert mine.json()["total"] == 1

    # Owner moves it to interview
    await login(client, employer.email)
    listing = await client.get(f"/api/v1/employer/jobs/{job_id}/applications")
    view = listing.json()["applications"][0]
    assert view["applicant"]["email"] == student.email
    assert view["compatibility"] == {"compatible": True, "reason": "MATCH"}

    response = await client.patch(
        f"/api/v1/employer/applications/{application_id}/status",
        json={"status": "INTERVIEWING", "notes": "Call scheduled"},
    )
    assert response.status_code == 200
    application = response.json()["application"]
    assert application["status"] == "INTERVIEWING"
    assert application["updated_at"] >= created_at

    count = await client.get("/api/v1/employer/applications/count")
    assert count.json() == {"count": 0}

    # Another employer is refused
    await login(client, other_employer.email)
    response = await client.patch(
        f"/api/v1/employer/applications/{application_id}/status", json={"status": "ACCEPTED"}
    )
    assert response.status_code == 403

    # Owner rejects, admin resets to PENDING
    await login(client, employer.email)
    response = await client.patch(
        f"/api/v1/employer/applications/{application_id}/status", json={"status": "REJECTED"}
    )
    assert response.json()["application"]["status"] == "REJECTED"

    await login(client, admin.email)
    response = await client.post(
        "/api/v1/admin/applications/status",
        json={"application_id": application_id, "status": "PENDING"},
    )
    assert response.status_code == 200
    assert response.json()["application"]["status"] == "PENDING"
    assert response.json()["application"]["notes"] == "Call scheduled"

    # Unknown label is a validation error
    response = await client.post(
        "/api/v1/admin/applications/status",
        json={"application_id": application_id, "status": "HIRED"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION"

    # Student withdraws
    await login(client, student.email)
    response = await client.delete(f"/api/v1/applications/{application_id}")
    assert response.status_code == 200
    response = await client.get(f"/api/v1/applications/{application_id}")
    assert response.status_code == 404


async def test_closing_a_job_blocks_applications(client, student, employer, job):
    await login(client, employer.email)
    response = await client.patch(f"/api/v1/employer/jobs/{job.id}/status", json={"status": "INACTIVE"})
    assert response.json()["job"]["status"] == "INACTIVE"

    await login(client, student.email)
    response = await client.post("/api/v1/applications", json={"job_posting_id": str(job.id)})
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


async def test_admin_user_management(client, admin, student):
    await login(client, admin.email)

    users = await client.get("/api/v1/admin/users")
    assert users.json()["total"] == 2

    response = await client.patch(f"/api/v1/admin/users/{admin.id}", json={"role": "STUDENT"})
    assert response.status_code == 400
    assert response.json()["code"] == "CONFLICT"

    response = await client.patch(f"/api/v1/admin/users/{student.id}", json={"role": "EMPLOYER"})
    assert response.json()["user"]["role"] == "EMPLOYER"

    response = await client.delete(f"/api/v1/admin/users/{student.id}")
    assert response.json() == {"success": True}

    response = await client.get(f"/api/v1/admin/users/{student.id}")
    assert response.status_code == 404


async def test_role_change_takes_effect_without_new_login(client, admin, student):
    await login(client, student.email)
    student_cookie = client.cookies.get(settings.AUTH_COOKIE_NAME)

    await login(client, admin.email)
    await client.patch(f"/api/v1/admin/users/{student.id}", json={"role": "EMPLOYER"})

    client.cookies.clear()
    client.cookies.set(settings.AUTH_COOKIE_NAME, student_cookie)
    response = await client.get("/api/v1/auth/me")
    assert response.json()["role"] == "EMPLOYER"


async def test_profile_update_over_http(client, student):
    await login(client, student.email)

    response = await client.put("/api/v1/profile", json={"mbti_type": "ENFP", "phone": ""})

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["mbti_type"] == "ENFP"
    assert profile["phone"] is None
    assert profile["resume_url"] == "https://files.test/resume.pdf"


async def test_token_of_deleted_user_is_rejected(client, db, student):
    student_id = student.id
    token = create_access_token(student_id, Role.STUDENT, student.email)

    await UserStore(db).delete(student_id)
    await db.commit()

    assert await authenticate(db, token) is None
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"


async def test_open_jobs_total_counts_beyond_the_page(client, db, student, employer, job):
    await make_job(db, employer, title="Data Intern", deadline_in=timedelta(days=14))
    await login(client, student.email)

    response = await client.get("/api/v1/jobs/open", params={"page_size": 1})

    body = response.json()
    assert [j["id"] for j in body["jobs"]] == [str(job.id)]
    assert body["total"] == 2
    assert body["page_size"] == 1


async def test_cors_echoes_only_listed_origins(client):
    allowed = settings.CORS_ORIGINS[0]

    response = await client.get("/", headers={"Origin": allowed})
    assert response.headers["access-control-allow-origin"] == allowed
    assert response.headers["access-control-allow-credentials"] == "true"

    response = await client.get("/", headers={"Origin": "http://evil.example"})
    assert "access-control-allow-origin" not in response.headers


def test_wildcard_cors_origin_is_refused():
    assert "*" not in Settings(_env_file=None).CORS_ORIGINS

    with pytest.raises(ValidationError):
        Settings(_env_file=None, CORS_ORIGINS="https://app.example.com, *")
