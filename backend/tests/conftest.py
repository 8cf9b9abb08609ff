from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

# Cheap bcrypt and no background sweeps for every app built in tests
os.environ.setdefault("BCRYPT_SALT_ROUNDS", "4")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.main import create_app
from app.services.storage import ImageStore
from helpers import API, PASSWORD, bearer


class InMemoryImageStore(ImageStore):
    def __init__(self) -> None:
        self.images: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self._counter = 0

    def upload_image(self, content: bytes, filename: str) -> str:
        self._counter += 1
        url = f"https://images.test/{self._counter}-{filename}"
        self.images[url] = content
        return url

    def delete_by_url(self, url: str) -> None:
        self.deleted.append(url)
        self.images.pop(url, None)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'jobboard.sqlite3'}",
        BCRYPT_SALT_ROUNDS=4,
        SCHEDULER_ENABLED=False,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_UPLOAD_SIZE_MB=1,
    )


@pytest.fixture
def image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def app(settings: Settings, image_store: InMemoryImageStore):
    application = create_app(settings)
    application.state.image_store = image_store
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(client: TestClient, app) -> Session:
    # Depends on client so the lifespan has created the tables
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def signup_jobseeker(client: TestClient) -> Callable[..., dict]:
    def _signup(name: str = "Jane Seeker", email: str = "jane@example.com") -> dict:
        response = client.post(
            f"{API}/auth/signup",
            json={
                "name": name,
                "email": email,
                "password": PASSWORD,
                "password_confirmation": PASSWORD,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _signup


@pytest.fixture
def signup_company(client: TestClient) -> Callable[..., dict]:
    def _signup(name: str = "Acme Labs", email: str = "hr@acme.com") -> dict:
        response = client.post(
            f"{API}/auth/company/signup",
            json={
                "name": name,
                "email": email,
                "password": PASSWORD,
                "password_confirmation": PASSWORD,
                "about": "We build tools for data teams.",
                "phone": "4155550100",
                "address": "221 Market Street",
                "website": "https://acme.example.com",
                "employees": 42,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _signup


@pytest.fixture
def create_job(client: TestClient) -> Callable[..., dict]:
    def _create(access_token: str, **overrides) -> dict:
        payload = {
            "title": "Backend Engineer",
            "description": "Build Python APIs",
            "salary_start": 1000,
            "salary_end": 2000,
            "start_date": "2020-01-01T00:00:00",
            "end_date": "2099-01-01T00:00:00",
        }
        payload.update(overrides)
        response = client.post(f"{API}/jobs", json=payload, headers=bearer(access_token))
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
