import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set required environment variables for testing
os.environ["API_PREFIX"] = "/api"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-0123456789abcdef"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from grocery_api.main import app
from grocery_api.database import get_db, configure_sqlite
from grocery_api.models.base import Base
import grocery_api.models  # noqa: F401

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """A fresh in-memory database per test; services commit, so nothing is shared."""
    engine = configure_sqlite(
        create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a new database session for each test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    def override_get_db():
        try:
            yield session
        finally:
            pass  # Closed after the test

    app.dependency_overrides[get_db] = override_get_db
    yield session

    session.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(db_session):
    """Create a FastAPI TestClient with database session override."""
    with TestClient(app) as c:
        yield c


def _make_user(db_session, email, password="testpass123", name=None):
    from grocery_api.models.user import User
    from grocery_api.utils.security import get_password_hash

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        name=name,
        is_demo=False,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    """Create a test user for authentication tests."""
    return _make_user(db_session, "test@example.com", name="Test User")


@pytest.fixture
def other_user(db_session):
    """A second account, used as a share recipient."""
    return _make_user(db_session, "b@example.com", name="Bea")


@pytest.fixture
def third_user(db_session):
    return _make_user(db_session, "c@example.com", name="Cal")


@pytest.fixture
def login(client):
    """Log an account in through the API and return its auth headers."""

    def _login(email, password="testpass123"):
        response = client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['data']['token']}"}

    return _login


@pytest.fixture
def auth_headers(login, test_user):
    """Get authorization headers with bearer token."""
    return login(test_user.email)


@pytest.fixture
def other_headers(login, other_user):
    return login(other_user.email)
