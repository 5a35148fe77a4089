"""
Shared fixtures: in-memory SQLite database, in-memory blob store, test client.
"""
import os

# Must be set before the app (and its settings/engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BLOB_STORE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.user import User
from app.storage.blob_store import BlobStoreError, InMemoryBlobStore, get_blob_store

PASSWORD = "12345678"


class FlakyBlobStore(InMemoryBlobStore):
    """In-memory blob store whose operations can be made to fail."""

    def __init__(self):
        super().__init__()
        self.fail_save = False
        self.fail_delete = False

    def save(self, data, name):
        if self.fail_save:
            raise BlobStoreError("disk full")
        super().save(data, name)

    def delete(self, name):
        if self.fail_delete:
            raise BlobStoreError("permission denied")
        super().delete(name)


@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory database per test; StaticPool shares one connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session_factory")
def session_factory_fixture(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(name="db")
def db_fixture(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(name="blob_store")
def blob_store_fixture():
    return FlakyBlobStore()


@pytest.fixture(name="client")
def client_fixture(session_factory, blob_store):
    """Test client with database and blob store dependencies overridden."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="password")
def password_fixture():
    """Password used by every user created through the signup fixture."""
    return PASSWORD


@pytest.fixture(name="make_user")
def make_user_fixture(db):
    """Insert a user directly, skipping bcrypt for speed."""
    def _make_user(username: str) -> User:
        user = User(
            first_name=username.capitalize(),
            last_name="Tester",
            username=username,
            email=f"{username}@libra.co",
            hashed_password="not-a-real-digest"
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture(name="signup")
def signup_fixture(client):
    """Sign a user up through the API and return the response body."""
    def _signup(username: str, os_name: str = "mac os", time_zone: str = "CEST") -> dict:
        response = client.post(
            "/api/v1/users/signup",
            json={
                "user_info": {
                    "first_name": username.capitalize(),
                    "last_name": "wu",
                    "username": username,
                    "password": PASSWORD,
                    "email": f"{username}@libra.co"
                },
                "os_name": os_name,
                "time_zone": time_zone
            }
        )
        assert response.status_code == 200, response.text
        return response.json()
    return _signup


@pytest.fixture(name="bearer")
def bearer_fixture():
    """Build bearer authorization headers."""
    def _bearer(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _bearer
