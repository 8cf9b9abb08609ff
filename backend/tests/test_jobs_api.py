from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from helpers import API, bearer

pytestmark = pytest.mark.integration


@pytest.fixture
def company_token(signup_company) -> str:
    return signup_company()["token"]["access_token"]


def test_company_creates_and_reads_job(client: TestClient, company_token: str, create_job) -> None:
    job = create_job(company_token, title="  Data Engineer ")

    assert job["title"] == "Data Engineer"
    assert job["salary_start"] == 1000

    response = client.get(f"{API}/jobs/{job['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == job["id"]


def test_jobseeker_cannot_create_job(client: TestClient, signup_jobseeker) -> None:
    token = signup_jobseeker()["token"]["access_token"]

    response = client.post(
        f"{API}/jobs",
        json={
            "title": "Backend Engineer",
            "description": "Build Python APIs",
            "salary_start": 1000,
            "salary_end": 2000,
            "start_date": "2020-01-01T00:00:00",
            "end_date": "2099-01-01T00:00:00",
        },
        headers=bearer(token),
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied"


def test_anonymous_cannot_create_job(client: TestClient) -> None:
    response = client.post(f"{API}/jobs", json={"title": "x"})

    assert response.status_code == 401


@pytest.mark.parametrize(
    "overrides",
    [
        {"salary_start": 3000, "salary_end": 2000},
        {"salary_start": 2000, "salary_end": 2000},
        {"start_date": "2099-02-01T00:00:00", "end_date": "2099-01-01T00:00:00"},
        {"salary_start": -1},
    ],
)
def test_create_job_validates_ranges(client: TestClient, company_token: str, overrides: dict) -> None:
    payload = {
        "title": "Backend Engineer",
        "description": "Build Python APIs",
        "salary_start": 1000,
        "salary_end": 2000,
        "start_date": "2020-01-01T00:00:00",
        "end_date": "2099-01-01T00:00:00",
    }
    payload.update(overrides)

    response = client.post(f"{API}/jobs", json=payload, headers=bearer(company_token))

    assert response.status_code == 400


def test_update_job_partially(client: TestClient, company_token: str, create_job) -> None:
    job = create_job(company_token)

    response = client.put(
        f"{API}/jobs/{job['id']}",
        json={"title": "Senior Backend Engineer", "salary_end": 5000},
        headers=bearer(company_token),
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["title"] == "Senior Backend Engineer"
    assert updated["salary_end"] == 5000
    assert updated["description"] == job["description"]


def test_update_job_checks_merged_salary_range(
    client: TestClient, company_token: str, create_job
) -> None:
    job = create_job(company_token, salary_start=1000, salary_end=2000)

    response = client.put(
        f"{API}/jobs/{job['id']}", json={"salary_start": 2500}, headers=bearer(company_token)
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Salary start must be less than salary end"


def test_other_company_sees_job_as_not_found(
    client: TestClient, signup_company, create_job
) -> None:
    owner = signup_company(name="Acme Labs", email="hr@acme.com")["token"]["access_token"]
    rival = signup_company(name="Globex Corp", email="hr@globex.com")["token"]["access_token"]
    job = create_job(owner)

    update = client.put(f"{API}/jobs/{job['id']}", json={"title": "Hijacked"}, headers=bearer(rival))
    delete = client.delete(f"{API}/jobs/{job['id']}", headers=bearer(rival))

    assert update.status_code == 404
    assert delete.status_code == 404
    assert client.get(f"{API}/jobs/{job['id']}").json()["data"]["title"] == job["title"]


def test_delete_job(client: TestClient, company_token: str, create_job) -> None:
    job = create_job(company_token)

    response = client.delete(f"{API}/jobs/{job['id']}", headers=bearer(company_token))

    assert response.status_code == 200
    assert client.get(f"{API}/jobs/{job['id']}").status_code == 404


def test_list_jobs_with_filters(client: TestClient, company_token: str, create_job) -> None:
    create_job(company_token, title="Backend Engineer", salary_start=1000, salary_end=2000)
    create_job(company_token, title="Frontend Engineer", salary_start=3000, salary_end=4000)
    create_job(company_token, title="Designer", salary_start=500, salary_end=900)

    everything = client.get(f"{API}/jobs").json()["data"]
    engineers = client.get(f"{API}/jobs", params={"title": "engineer"}).json()["data"]
    well_paid = client.get(f"{API}/jobs", params={"salary_start": 2500}).json()["data"]
    capped = client.get(f"{API}/jobs", params={"salary_end": 2000}).json()["data"]

    assert len(everything) == 3
    assert {job["title"] for job in engineers} == {"Backend Engineer", "Frontend Engineer"}
    assert [job["title"] for job in well_paid] == ["Frontend Engineer"]
    assert {job["title"] for job in capped} == {"Backend Engineer", "Designer"}


def test_title_filter_matches_wildcards_literally(
    client: TestClient, company_token: str, create_job
) -> None:
    create_job(company_token, title="100% Remote")
    create_job(company_token, title="1000 Remote")
    create_job(company_token, title="Remote_Ops")
    create_job(company_token, title="RemoteXOps")

    percent = client.get(f"{API}/jobs", params={"title": "100%"}).json()["data"]
    underscore = client.get(f"{API}/jobs", params={"title": "e_o"}).json()["data"]

    assert [job["title"] for job in percent] == ["100% Remote"]
    assert [job["title"] for job in underscore] == ["Remote_Ops"]


def test_list_jobs_rejects_bad_filter(client: TestClient) -> None:
    response = client.get(f"{API}/jobs", params={"salary_start": "lots"})

    assert response.status_code == 400


def test_get_unknown_job(client: TestClient) -> None:
    response = client.get(f"{API}/jobs/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Job not found"
