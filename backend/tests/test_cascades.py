from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.models import Application, Company, Job, PersonalToken, User
from helpers import API, bearer

pytestmark = pytest.mark.integration


def test_deleting_company_user_removes_company_jobs_and_applications(
    client: TestClient, db: Session, signup_company, signup_jobseeker, create_job
) -> None:
    company = signup_company()
    token = company["token"]["access_token"]
    job = create_job(token)
    seeker = signup_jobseeker()
    client.post(
        f"{API}/applications",
        json={"job_id": job["id"]},
        headers=bearer(seeker["token"]["access_token"]),
    )

    # Row-level delete so only the database foreign keys do the cascading
    db.execute(delete(User).where(User.id == company["company"]["user"]["id"]))
    db.commit()

    assert db.query(Company).count() == 0
    assert db.query(Job).count() == 0
    assert db.query(Application).count() == 0
    assert db.query(PersonalToken).filter(PersonalToken.user_id == seeker["user"]["id"]).count() == 1
