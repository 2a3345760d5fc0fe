import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db import Base, get_db
from app.deps import get_today
from app.core.security import create_session_token
from app.services.auth_service import register_user
from app.settings import settings

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool # Important for in-memory to share connection across threads/sessions
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed "today" so provisioning and streaks are deterministic
TODAY = date(2025, 12, 10)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True, scope="session")
def _disable_rate_limit():
    app.state.limiter.enabled = False
    yield
    app.state.limiter.enabled = True


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Test client with DB and clock overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


def session_headers(user) -> dict:
    token = create_session_token(user.id)
    return {"Cookie": f"{settings.session_cookie_name}={token}"}


@pytest.fixture
def user(db_session):
    """alice, with the six default templates."""
    return register_user(db_session, "alice", "secret1", "Alice", date(2025, 11, 17))


@pytest.fixture
def other_user(db_session):
    return register_user(db_session, "bob", "secret2", "Bob", date(2025, 11, 17))


@pytest.fixture
def auth_headers(user):
    return session_headers(user)


@pytest.fixture
def other_headers(other_user):
    return session_headers(other_user)


@pytest.fixture
def headers_for():
    return session_headers
