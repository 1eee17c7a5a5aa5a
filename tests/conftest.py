import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("MEDIA_BACKEND", "supabase")

import pytest
from fastapi.testclient import TestClient

from app.models.user import OwnerSession
from app.utils.database import SupabaseClient
from tests.fakes import FakeSupabase


@pytest.fixture
def fake_supabase():
    fake = FakeSupabase()
    SupabaseClient._instance = fake
    SupabaseClient._auth_instance = fake
    yield fake
    SupabaseClient.reset()


@pytest.fixture
def session():
    return OwnerSession(owner_id="owner-1", email="ada@example.com", name="Ada")


@pytest.fixture
def other_session():
    return OwnerSession(owner_id="owner-2", email="bob@example.com", name="Bob")


@pytest.fixture
def client(fake_supabase):
    from app.main import app
    return TestClient(app)


@pytest.fixture
def auth_headers(fake_supabase):
    response = fake_supabase.auth.sign_up({
        "email": "ada@example.com",
        "password": "secret123",
        "options": {"data": {"name": "Ada"}},
    })
    return {"Authorization": f"Bearer {response.session.access_token}"}
