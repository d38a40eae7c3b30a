from __future__ import annotations

from typing import Any, Callable

import mongomock
import pytest
from fastapi.testclient import TestClient

from placement_portal.core.auth import issue_token
from placement_portal.core.config import Settings
from placement_portal.db.mongodb import MongoStore
from placement_portal.main import create_app
from placement_portal.schemas.schemas import UserRole
from placement_portal.services import AccountService, CompanyService


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        mongodb_uri="mongodb://test",
        mongodb_db="placement_test",
        jwt_secret_key="test-secret",
        upload_dir=str(tmp_path / "uploads"),
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def store(settings) -> MongoStore:
    store = MongoStore(settings.mongodb_uri, settings.mongodb_db, client=mongomock.MongoClient())
    store.open()
    store.init_indexes()
    return store


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def accounts(store) -> AccountService:
    return AccountService(store)


@pytest.fixture
def companies(store) -> CompanyService:
    return CompanyService(store)


@pytest.fixture
def make_user(accounts) -> Callable[..., dict]:
    counter = {"n": 0}

    def _make(**kwargs: Any) -> dict:
        counter["n"] += 1
        defaults: dict[str, Any] = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "password": "secret123",
            "role": UserRole.student,
            "branch": "CSE",
            "cgpa": 8.0,
        }
        defaults.update(kwargs)
        return accounts.create(**defaults)

    return _make


@pytest.fixture
def auth_header(settings) -> Callable[[dict], dict]:
    def _header(user: dict) -> dict:
        return {"Authorization": f"Bearer {issue_token(user, settings)}"}

    return _header


@pytest.fixture
def tpo(make_user) -> dict:
    return make_user(name="Placement Officer", email="tpo@example.com", role=UserRole.tpo, cgpa=10)


@pytest.fixture
def admin(make_user) -> dict:
    return make_user(name="Admin", email="admin@example.com", role=UserRole.admin, cgpa=10)


@pytest.fixture
def make_company(companies, tpo) -> Callable[..., dict]:
    def _make(**kwargs: Any) -> dict:
        defaults: dict[str, Any] = {
            "company_name": "Acme",
            "role": "Software Engineer",
            "package": 12,
            "min_cgpa": 7.0,
            "eligible_branches": ["CSE", "IT"],
        }
        defaults.update(kwargs)
        return companies.create(defaults, created_by=tpo["id"])

    return _make
