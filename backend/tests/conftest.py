"""
Shared pytest fixtures.

Every test runs against a fresh in-memory SQLite database and fake LLM
objects; nothing talks to a real model provider or identity provider.
"""

import os

# Settings are read at import time, so point them at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_PROVIDER", "gemini")

import json
from datetime import timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import Base, get_db
from app.core.deps import get_current_claims
from app.models.user import User


VALID_INSIGHTS = {
    "salaryRanges": [
        {"role": "Software Engineer", "min": 80000, "max": 160000, "median": 120000, "location": "US"},
        {"role": "Data Scientist", "min": 90000, "max": 170000, "median": 130000, "location": "US"},
        {"role": "DevOps Engineer", "min": 85000, "max": 150000, "median": 115000, "location": "US"},
        {"role": "Product Manager", "min": 95000, "max": 180000, "median": 135000, "location": "US"},
        {"role": "QA Engineer", "min": 60000, "max": 110000, "median": 85000, "location": "US"},
    ],
    "growthRate": 12.5,
    "demandLevel": "High",
    "topSkills": ["Python", "Cloud", "SQL", "Kubernetes", "TypeScript"],
    "marketOutlook": "Positive",
    "keyTrends": ["Generative AI", "Platform engineering", "Remote work", "Security", "Edge computing"],
    "recommendedSkills": ["Machine Learning", "Rust", "Terraform", "Go", "System design"],
}


class FakeLLM:
    """
    Stands in for LLMManager. Replies are served in order; the last one repeats.
    """

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [json.dumps(VALID_INSIGHTS)])
        self.error = error
        self.calls = []

    def get_response(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def as_utc(value):
    """SQLite drops tzinfo; treat naive datetimes read back from it as UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db_session):
    """Factory inserting a user row."""
    def _make_user(clerk_user_id="user_clerk_1", industry="tech-software-development", **fields):
        user = User(
            id=f"user_{clerk_user_id}",
            clerkUserId=clerk_user_id,
            industry=industry,
            name=fields.pop("name", "Ada Lovelace"),
            skills=fields.pop("skills", ["Python", "SQL"]),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def auth_claims():
    """Mutable claims of the simulated caller; clear it for anonymous requests."""
    return {"sub": "user_clerk_1", "email": "ada@example.com", "name": "Ada Lovelace"}


@pytest.fixture
def client(db_session, auth_claims):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_current_claims] = lambda: auth_claims or None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
