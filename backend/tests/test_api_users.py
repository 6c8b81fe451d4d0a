"""
Tests for account sync and onboarding endpoints.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.main import app
from app.db.session import get_db
from app.models.industry_insight import IndustryInsight
from app.models.user import User
from app.services.insights_service import InsightGenerator, InsightService, get_insight_service
from app.services.user_service import UserService, format_industry, get_user_service
from conftest import FakeLLM


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def users_client(client, fake_llm):
    service = InsightService(InsightGenerator(fake_llm))
    app.dependency_overrides[get_insight_service] = lambda: service
    return client


def test_format_industry():
    assert format_industry("tech") == "tech"
    assert format_industry("tech", "Software  Development") == "tech-software-development"


class TestSyncUser:

    def test_first_sync_creates_user_from_claims(self, users_client, db_session):
        response = users_client.post("/api/v1/users/me")

        assert response.status_code == 200
        data = response.json()
        assert data["clerkUserId"] == "user_clerk_1"
        assert data["email"] == "ada@example.com"
        assert data["industry"] is None
        assert db_session.query(User).count() == 1

    def test_repeated_sync_returns_same_user(self, users_client, db_session):
        first = users_client.post("/api/v1/users/me").json()
        second = users_client.post("/api/v1/users/me").json()

        assert first["id"] == second["id"]
        assert db_session.query(User).count() == 1

    def test_sync_requires_identity(self, users_client, auth_claims):
        auth_claims.clear()

        assert users_client.post("/api/v1/users/me").status_code == 401

    def test_concurrent_first_sign_in_returns_stored_user(self):
        winner = User(id="user_winner", clerkUserId="user_clerk_1", skills=[])
        db = MagicMock()
        db.query.return_value.filter.return_value.first.side_effect = [None, winner]
        db.commit.side_effect = IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed"))

        result = UserService().check_user(db, {"sub": "user_clerk_1"})

        assert result is winner
        db.rollback.assert_called_once()

    def test_sync_persistence_failure_is_internal_error(self, users_client):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        db.commit.side_effect = OperationalError("INSERT INTO users", {}, Exception("database is locked"))
        app.dependency_overrides[get_db] = lambda: db

        response = users_client.post("/api/v1/users/me")

        assert response.status_code == 500
        assert response.json()["detail"] == "Error creating user"
        db.rollback.assert_called_once()

    def test_unexpected_sync_error_is_internal_error(self, users_client):
        failing_service = MagicMock()
        failing_service.check_user.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_user_service] = lambda: failing_service

        response = users_client.post("/api/v1/users/me")

        assert response.status_code == 500
        assert response.json()["detail"] == "An unexpected error occurred while syncing the user."


class TestOnboarding:

    def test_new_user_is_not_onboarded(self, users_client):
        users_client.post("/api/v1/users/me")

        response = users_client.get("/api/v1/users/me/onboarding-status")

        assert response.status_code == 200
        assert response.json() == {"isOnboarded": False}

    def test_profile_update_onboards_and_creates_insight(self, users_client, db_session, fake_llm):
        users_client.post("/api/v1/users/me")

        response = users_client.put("/api/v1/users/me/profile", json={
            "industry": "tech",
            "subIndustry": "Software Development",
            "experience": 5,
            "bio": "Backend developer",
            "skills": ["Python", "FastAPI"],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["industry"] == "tech-software-development"
        assert data["skills"] == ["Python", "FastAPI"]
        assert users_client.get("/api/v1/users/me/onboarding-status").json() == {"isOnboarded": True}
        insight = db_session.query(IndustryInsight).one()
        assert insight.industry == "tech-software-development"
        assert len(fake_llm.calls) == 1

    def test_profile_update_reuses_existing_industry_insight(self, users_client, db_session, fake_llm):
        db_session.add(IndustryInsight(
            id="insight_shared", industry="tech-software-development", growthRate=3, demandLevel="Low",
            marketOutlook="Negative", salaryRanges=[], topSkills=[], keyTrends=[], recommendedSkills=[],
            nextUpdate=datetime.now(timezone.utc),
        ))
        db_session.commit()
        users_client.post("/api/v1/users/me")

        users_client.put("/api/v1/users/me/profile", json={"industry": "tech", "subIndustry": "Software Development"})

        assert db_session.query(IndustryInsight).count() == 1
        assert fake_llm.calls == []
        assert users_client.get("/api/v1/insights/").json()["id"] == "insight_shared"

    def test_profile_validation(self, users_client):
        users_client.post("/api/v1/users/me")

        response = users_client.put("/api/v1/users/me/profile", json={"industry": "tech", "experience": -1})

        assert response.status_code == 422
