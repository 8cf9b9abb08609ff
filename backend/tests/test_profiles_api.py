from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.main import create_app
from app.models import Company
from app.services.profiles import ProfileService
from helpers import API, PASSWORD, bearer, skip_first_call

pytestmark = pytest.mark.integration

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def token(signup_jobseeker) -> str:
    return signup_jobseeker()["token"]["access_token"]


def upload(client: TestClient, token: str, filename: str = "me.png", content_type: str = "image/png", content: bytes = PNG):
    return client.put(
        f"{API}/profiles/photo",
        files={"file": (filename, content, content_type)},
        headers=bearer(token),
    )


def test_update_profile_fields(client: TestClient, token: str) -> None:
    response = client.patch(
        f"{API}/profiles",
        json={"name": "Jane Renamed", "portfolio": "https://jane.dev", "cv": "https://jane.dev/cv.pdf"},
        headers=bearer(token),
    )

    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["name"] == "Jane Renamed"
    assert profile["portfolio"] == "https://jane.dev"
    assert profile["cv"] == "https://jane.dev/cv.pdf"
    assert "password_hash" not in profile


def test_update_profile_rejects_taken_name_and_bad_url(
    client: TestClient, token: str, signup_jobseeker
) -> None:
    signup_jobseeker(name="Taken Name", email="taken@example.com")

    taken = client.patch(f"{API}/profiles", json={"name": "Taken Name"}, headers=bearer(token))
    bad_url = client.patch(f"{API}/profiles", json={"portfolio": "jane.dev"}, headers=bearer(token))

    assert taken.status_code == 409
    assert bad_url.status_code == 400


def test_profile_requires_authentication(client: TestClient) -> None:
    assert client.patch(f"{API}/profiles", json={"name": "Nobody"}).status_code == 401


def test_upload_and_replace_photo(client: TestClient, token: str, image_store) -> None:
    first = upload(client, token)
    assert first.status_code == 200
    first_url = first.json()["data"]["profile"]
    assert first_url in image_store.images

    second = upload(client, token, filename="me.jpg", content_type="image/jpeg")
    second_url = second.json()["data"]["profile"]

    assert second.status_code == 200
    assert second_url != first_url
    assert image_store.deleted == [first_url]
    assert list(image_store.images) == [second_url]


@pytest.mark.parametrize(
    ("filename", "content_type", "content"),
    [
        ("me.gif", "image/gif", PNG),
        ("me.png", "text/plain", PNG),
        ("me.png", "image/png", b""),
        ("me.png", "image/png", b"\x00" * (1024 * 1024 + 1)),
    ],
)
def test_upload_photo_rejects_bad_files(
    client: TestClient, token: str, image_store, filename: str, content_type: str, content: bytes
) -> None:
    response = upload(client, token, filename, content_type, content)

    assert response.status_code == 400
    assert image_store.images == {}


def test_delete_photo(client: TestClient, token: str, image_store) -> None:
    missing = client.delete(f"{API}/profiles/photo", headers=bearer(token))
    assert missing.status_code == 404
    assert missing.json()["message"] == "Profile photo not found"

    url = upload(client, token).json()["data"]["profile"]
    response = client.delete(f"{API}/profiles/photo", headers=bearer(token))

    assert response.status_code == 200
    assert response.json()["data"]["profile"] is None
    assert image_store.deleted == [url]


def test_change_password(client: TestClient, token: str) -> None:
    new_password = "NewPassword2@"

    wrong = client.patch(
        f"{API}/profiles/change-password",
        json={
            "current_password": "Wrong1!pass",
            "new_password": new_password,
            "confirm_new_password": new_password,
        },
        headers=bearer(token),
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    ok = client.patch(
        f"{API}/profiles/change-password",
        json={
            "current_password": PASSWORD,
            "new_password": new_password,
            "confirm_new_password": new_password,
        },
        headers=bearer(token),
    )
    assert ok.status_code == 200

    old_signin = client.post(f"{API}/auth/signin", json={"email": "jane@example.com", "password": PASSWORD})
    new_signin = client.post(f"{API}/auth/signin", json={"email": "jane@example.com", "password": new_password})
    assert old_signin.status_code == 401
    assert new_signin.status_code == 200


def test_change_password_requires_matching_confirmation(client: TestClient, token: str) -> None:
    response = client.patch(
        f"{API}/profiles/change-password",
        json={
            "current_password": PASSWORD,
            "new_password": "NewPassword2@",
            "confirm_new_password": "NewPassword3@",
        },
        headers=bearer(token),
    )

    assert response.status_code == 400


def test_rename_that_loses_the_race_is_a_conflict(
    client: TestClient, token: str, signup_jobseeker, monkeypatch: pytest.MonkeyPatch
) -> None:
    signup_jobseeker(name="Taken Name", email="taken@example.com")
    # The pre-commit check misses the other user; the unique index catches it
    calls = skip_first_call(monkeypatch, ProfileService, "_name_taken", False)

    response = client.patch(f"{API}/profiles", json={"name": "Taken Name"}, headers=bearer(token))

    assert len(calls) == 2
    assert response.status_code == 409
    assert response.json()["message"] == "Name already registered"
    current = client.get(f"{API}/auth/current", headers=bearer(token))
    assert current.json()["data"]["name"] == "Jane Seeker"


def test_company_rename_moves_the_company_name(
    client: TestClient, db: Session, signup_company, signup_jobseeker
) -> None:
    company_token = signup_company(name="Acme Labs", email="hr@acme.com")["token"]["access_token"]
    seeker_token = signup_jobseeker()["token"]["access_token"]

    response = client.patch(f"{API}/profiles", json={"name": "Globex Corp"}, headers=bearer(company_token))
    assert response.status_code == 200

    company = db.query(Company).one()
    assert company.name == "Globex Corp"

    # The old name is free again, the new one is taken for everybody
    signup_company(name="Acme Labs", email="jobs@acme.com")
    taken = client.patch(f"{API}/profiles", json={"name": "Globex Corp"}, headers=bearer(seeker_token))
    assert taken.status_code == 409


def test_local_store_serves_uploaded_photos(settings) -> None:
    # The real disk-backed store behind the /uploads mount
    with TestClient(create_app(settings)) as client:
        token = client.post(
            f"{API}/auth/signup",
            json={
                "name": "Jane Seeker",
                "email": "jane@example.com",
                "password": PASSWORD,
                "password_confirmation": PASSWORD,
            },
        ).json()["data"]["token"]["access_token"]

        first_url = upload(client, token).json()["data"]["profile"]
        assert first_url.startswith(settings.UPLOAD_URL_PREFIX + "/")
        served = client.get(first_url)
        assert served.status_code == 200
        assert served.content == PNG

        replacement = b"\xff\xd8\xff\xe0" + b"\x01" * 32
        second_url = upload(
            client, token, filename="me.jpg", content_type="image/jpeg", content=replacement
        ).json()["data"]["profile"]
        assert client.get(second_url).content == replacement
        assert client.get(first_url).status_code == 404

        client.delete(f"{API}/profiles/photo", headers=bearer(token))
        assert client.get(second_url).status_code == 404
        assert list(Path(settings.UPLOAD_DIR).iterdir()) == []
