"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path
from typing import Optional

import pytest
from sqlalchemy.orm import Session

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))
# Also ensure project root is on sys.path for imports in tests
project_root = backend_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

ADMIN_USER_ID = "user_admin_0001"

# Settings are cached on first use, so the test environment must be in place before app imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["ADMIN_USER_ID"] = ADMIN_USER_ID
os.environ.pop("IDENTITY_DIRECTORY_URL", None)

from app.core.auth import SessionIdentity, SessionResolver
from app.core.database import Base, get_engine, get_session_local

REAL_SESSIONS = object()


class FakeSessionResolver(SessionResolver):
    """Resolves every request to a fixed identity (None = anonymous)"""

    def __init__(self, identity: Optional[SessionIdentity]):
        self.identity = identity
        self.calls = 0

    def resolve(self, request):
        self.calls += 1
        return self.identity


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session with a clean schema for each test"""
    import app.models  # noqa: F401

    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def visitor() -> SessionIdentity:
    return SessionIdentity(user_id="user_visitor_0001", email="visitor@example.com")


@pytest.fixture
def admin() -> SessionIdentity:
    return SessionIdentity(user_id=ADMIN_USER_ID, email="admin@example.com")


@pytest.fixture(scope="function")
def make_client(db: Session):
    """
    Build a TestClient bound to the test database

    identity: SessionIdentity for a signed-in caller, None for anonymous,
    REAL_SESSIONS to go through the real cookie/session lookup.
    overrides: extra dependency overrides {dependency: factory}
    """
    from fastapi.testclient import TestClient

    from app.core.auth import get_session_resolver
    from app.core.database import get_db
    from app.main import app as fastapi_app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def _make(identity=REAL_SESSIONS, overrides=None):
        fastapi_app.dependency_overrides[get_db] = override_get_db
        if identity is not REAL_SESSIONS:
            resolver = FakeSessionResolver(identity)
            fastapi_app.dependency_overrides[get_session_resolver] = lambda: resolver
        for dependency, factory in (overrides or {}).items():
            fastapi_app.dependency_overrides[dependency] = factory
        return TestClient(fastapi_app)

    yield _make
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    """Client going through real session cookies"""
    return make_client()


@pytest.fixture
def signed_in_client(make_client, visitor):
    return make_client(identity=visitor)


@pytest.fixture
def anonymous_client(make_client):
    return make_client(identity=None)
