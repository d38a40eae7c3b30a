from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from placement_portal.core.rate_limit import limiter
from placement_portal.main import create_app
from placement_portal.schemas.schemas import UserRole


def register(client, **overrides):
    body = {
        "name": "Asha",
        "email": "asha@example.com",
        "password": "secret123",
        "branch": "CSE",
        "cgpa": 8.2,
        "skills": "Python, React , ,SQL",
    }
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["mongodb"] == "connected"


def test_register_returns_token_and_student_profile(client):
    response = register(client, role="admin")

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["role"] == "student"
    assert body["skills"] == ["Python", "React", "SQL"]
    assert "password" not in body

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "asha@example.com"


def test_register_duplicate_email_conflicts(client):
    register(client)
    response = register(client, email="ASHA@example.com")

    assert response.status_code == 409
    assert response.json() == {"detail": "User already exists with this email", "error": "conflict"}


def test_register_rejects_out_of_range_cgpa(client):
    response = register(client, cgpa=11)

    assert response.status_code == 422
    assert response.json()["error"] == "validation"
    assert response.json()["detail"].startswith("cgpa")


def test_login(client):
    register(client)

    ok = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["token"]

    bad = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid email or password"


def test_missing_and_invalid_tokens_are_401(client):
    missing = client.get("/api/users/me")
    assert missing.status_code == 401
    assert missing.json() == {"detail": "Not authenticated", "error": "unauthenticated"}

    garbage = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401
    assert garbage.json()["detail"] == "Invalid or expired token"


def test_token_for_deleted_account_is_rejected(client, accounts, make_user, auth_header):
    user = make_user()
    headers = auth_header(user)
    accounts.delete(user["id"])

    response = client.get("/api/users/me", headers=headers)
    assert response.status_code == 401


def test_authentication_is_checked_before_role(client, make_user, auth_header):
    student = make_user()

    assert client.get("/api/analytics").status_code == 401
    forbidden = client.get("/api/analytics", headers=auth_header(student))
    assert forbidden.status_code == 403
    assert forbidden.json() == {"detail": "Insufficient permissions", "error": "forbidden"}


def test_update_profile(client, make_user, auth_header):
    student = make_user(cgpa=7.0)

    response = client.put(
        "/api/users/me", json={"cgpa": 8.4, "skills": "Go,Rust"}, headers=auth_header(student)
    )
    assert response.status_code == 200
    assert response.json()["cgpa"] == 8.4
    assert response.json()["skills"] == ["Go", "Rust"]

    invalid = client.put("/api/users/me", json={"cgpa": 10.5}, headers=auth_header(student))
    assert invalid.status_code == 422


def test_student_and_tpo_company_listing(client, make_company, make_user, tpo, auth_header):
    make_company(company_name="Open", min_cgpa=6.0)
    make_company(company_name="Closed", min_cgpa=9.5)
    student = make_user(branch="CSE", cgpa=8.0)

    student_view = client.get("/api/companies", headers=auth_header(student)).json()
    tpo_view = client.get("/api/companies", headers=auth_header(tpo)).json()

    assert [c["company_name"] for c in student_view] == ["Open"]
    assert {c["company_name"] for c in tpo_view} == {"Open", "Closed"}
    assert tpo_view[0]["created_by"]["name"] == "Placement Officer"


def test_company_crud_by_tpo(client, tpo, make_user, auth_header):
    headers = auth_header(tpo)
    created = client.post("/api/companies", headers=headers, json={
        "company_name": "Google",
        "role": "SWE",
        "package": 24,
        "min_cgpa": 8,
        "eligible_branches": ["CSE"],
        "rounds": [{"name": "Online Test", "type": "Coding"}],
    })
    assert created.status_code == 201
    company_id = created.json()["id"]

    updated = client.put(f"/api/companies/{company_id}", headers=headers, json={"package": 30})
    assert updated.json()["package"] == 30
    assert updated.json()["min_cgpa"] == 8

    student = make_user()
    denied = client.post("/api/companies", headers=auth_header(student), json={
        "company_name": "X", "role": "Y", "package": 1, "min_cgpa": 1,
    })
    assert denied.status_code == 403

    deleted = client.delete(f"/api/companies/{company_id}", headers=headers)
    assert deleted.json()["message"] == "Company deleted successfully"
    assert client.get(f"/api/companies/{company_id}", headers=headers).status_code == 404


def test_malformed_id_is_not_found(client, tpo, auth_header):
    response = client.get("/api/companies/not-an-id", headers=auth_header(tpo))

    assert response.status_code == 404
    assert response.json() == {"detail": "Company not found", "error": "not_found"}


def test_apply_flow(client, make_company, make_user, tpo, auth_header):
    company = make_company(company_name="Google")
    student = make_user(name="Asha")
    student_headers = auth_header(student)

    applied = client.post("/api/applications", json={"company_id": company["id"]}, headers=student_headers)
    assert applied.status_code == 201
    assert applied.json()["status"] == "Applied"

    again = client.post("/api/applications", json={"company_id": company["id"]}, headers=student_headers)
    assert again.status_code == 409
    assert again.json()["detail"] == "You have already applied to this company"

    mine = client.get("/api/applications/me", headers=student_headers).json()
    assert [a["company"]["company_name"] for a in mine] == ["Google"]

    tpo_headers = auth_header(tpo)
    for_company = client.get(f"/api/applications/company/{company['id']}", headers=tpo_headers).json()
    assert for_company[0]["student"]["name"] == "Asha"

    selected = client.put(
        f"/api/applications/{applied.json()['id']}/status",
        json={"status": "Selected", "remarks": "Offer released"},
        headers=tpo_headers,
    )
    assert selected.status_code == 200
    assert selected.json()["remarks"] == "Offer released"

    me = client.get("/api/users/me", headers=student_headers).json()
    assert me["is_placed"] is True


def test_ineligible_student_gets_403(client, make_company, make_user, auth_header):
    company = make_company(min_cgpa=8.0, eligible_branches=["ECE"])
    student = make_user(branch="ECE", cgpa=7.0)

    response = client.post("/api/applications", json={"company_id": company["id"]}, headers=auth_header(student))

    assert response.status_code == 403
    assert response.json() == {"detail": "You do not meet the minimum CGPA requirement", "error": "eligibility"}


def test_staff_cannot_apply(client, make_company, tpo, auth_header):
    company = make_company()

    response = client.post("/api/applications", json={"company_id": company["id"]}, headers=auth_header(tpo))
    assert response.status_code == 403


def test_invalid_status_is_rejected(client, make_company, make_user, tpo, auth_header):
    company = make_company()
    student = make_user()
    app = client.post("/api/applications", json={"company_id": company["id"]}, headers=auth_header(student))

    response = client.put(
        f"/api/applications/{app.json()['id']}/status", json={"status": "Hired"}, headers=auth_header(tpo)
    )
    assert response.status_code == 422


def test_user_management(client, make_user, tpo, admin, auth_header):
    student = make_user(name="Rahul")

    listed = client.get("/api/users", params={"role": "student"}, headers=auth_header(tpo)).json()
    assert [u["name"] for u in listed] == ["Rahul"]

    assert client.delete(f"/api/users/{student['id']}", headers=auth_header(tpo)).status_code == 403

    deleted = client.delete(f"/api/users/{student['id']}", headers=auth_header(admin))
    assert deleted.status_code == 200
    assert client.get(f"/api/users/{student['id']}", headers=auth_header(admin)).status_code == 404

    protected = client.delete(f"/api/users/{admin['id']}", headers=auth_header(admin))
    assert protected.status_code == 403
    assert protected.json()["detail"] == "Cannot delete admin users"


def test_resume_upload(client, settings, accounts, make_user, auth_header):
    student = make_user()

    response = client.post(
        "/api/users/me/resume",
        files={"resume": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")},
        headers=auth_header(student),
    )

    assert response.status_code == 200
    filename = response.json()["resume"]
    assert filename.startswith(f"{student['id']}-") and filename.endswith(".pdf")
    assert os.path.exists(os.path.join(settings.upload_dir, filename))
    assert accounts.get(student["id"])["resume"] == filename

    served = client.get(f"/uploads/{filename}")
    assert served.status_code == 200
    assert served.content == b"%PDF-1.4 resume"


def test_resume_upload_rejects_other_types(client, make_user, tpo, auth_header):
    student = make_user()

    response = client.post(
        "/api/users/me/resume",
        files={"resume": ("cv.exe", b"MZ", "application/octet-stream")},
        headers=auth_header(student),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation"

    staff = client.post(
        "/api/users/me/resume",
        files={"resume": ("cv.pdf", b"%PDF", "application/pdf")},
        headers=auth_header(tpo),
    )
    assert staff.status_code == 403


def test_analytics_endpoint(client, make_company, make_user, admin, auth_header):
    make_company(package=10)
    make_company(package=20)
    make_user(branch="CSE")
    make_user(branch="ECE", role=UserRole.student)

    response = client.get("/api/analytics", headers=auth_header(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["total_students"] == 2
    assert body["placement_percentage"] == 0
    assert body["average_package"] == 15
    assert {row["branch"] for row in body["branch_wise"]} == {"CSE", "ECE"}


def test_blank_name_update_is_rejected(client, make_user, auth_header):
    student = make_user(name="Kept")

    response = client.put("/api/users/me", json={"name": "   "}, headers=auth_header(student))

    assert response.status_code == 400
    assert response.json() == {"detail": "Name cannot be blank", "error": "validation"}


def test_unknown_route_and_wrong_method_use_error_body(client):
    missing = client.get("/api/nope")
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Not Found", "error": "not_found"}

    wrong_method = client.delete("/api/analytics")
    assert wrong_method.status_code == 405
    assert wrong_method.json() == {"detail": "Method Not Allowed", "error": "error"}


def test_error_body_is_documented(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    login_responses = schema["paths"]["/api/auth/login"]["post"]["responses"]
    assert login_responses["401"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")


def test_large_responses_are_gzipped(client, make_company, tpo, auth_header):
    for i in range(40):
        make_company(company_name=f"Company {i}", description="Campus hiring drive " * 5)

    response = client.get(
        "/api/companies", headers={**auth_header(tpo), "Accept-Encoding": "gzip"}
    )

    assert response.status_code == 200
    assert response.headers["content-encoding"] == "gzip"
    assert len(response.json()) == 40


def test_small_responses_are_not_compressed(client):
    response = client.get("/health", headers={"Accept-Encoding": "gzip"})

    assert "content-encoding" not in response.headers


def test_upload_dir_is_created_on_startup(settings, store):
    app = create_app(settings=settings, store=store)
    assert not os.path.exists(settings.upload_dir)

    with TestClient(app):
        assert os.path.isdir(settings.upload_dir)


@pytest.fixture
def production_client(settings, store):
    limiter.reset()
    app = create_app(settings=settings.model_copy(update={"environment": "production"}), store=store)
    with TestClient(app) as test_client:
        yield test_client
    limiter.reset()
    limiter.enabled = False


def login_attempt(test_client):
    return test_client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})


def test_auth_routes_are_rate_limited_in_production(production_client):
    for _ in range(20):
        assert login_attempt(production_client).status_code == 401

    limited = login_attempt(production_client)
    assert limited.status_code == 429
    assert limited.json() == {
        "detail": "Too many login attempts, please try again after 15 minutes.",
        "error": "rate_limited",
    }

    # the rest of /api has its own budget
    assert production_client.get("/api/users/me").status_code == 401
    assert production_client.get("/health").status_code == 200


def test_no_rate_limit_outside_production(client):
    for _ in range(25):
        assert login_attempt(client).status_code == 401
