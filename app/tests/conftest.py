"""
Pytest configuration and fixtures
"""
import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine

from app.main import app
from app.db.base import Base
from app.db.init_db import seed_permissions
from app.core.config import settings
from app.core.deps import get_db
from app.core.security import hash_password
from app.models.user import User
from app.models.role_permission import RolePermission
from app.services.email_service import SimulatedTransport


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def file_stores(tmp_path, monkeypatch):
    """Generated reports and docs go to a per-test directory"""
    monkeypatch.setattr(settings, "REPORTS_DIR", str(tmp_path / "reports"))
    monkeypatch.setattr(settings, "DOCS_DIR", str(tmp_path / "docs"))
    return tmp_path


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_transport():
    """Instant simulated transport; every email is opened"""
    return SimulatedTransport(send_delay=0, open_delay=0, open_rate=1.0, rng=random.Random(7))


@pytest.fixture(scope="function")
def client(db, email_transport):
    """Test client fixture with database override"""
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    previous_factory = app.state.session_factory
    previous_transport = app.state.email_transport
    app.dependency_overrides[get_db] = override_get_db
    # Background work opens its own sessions on the test database
    app.state.session_factory = TestingSessionLocal
    app.state.email_transport = email_transport
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.session_factory = previous_factory
    app.state.email_transport = previous_transport


def make_user(db: Session, username: str, role: str, password: str = "secret123", is_active: bool = True) -> User:
    user = User(
        username=username,
        first_name=username.capitalize(),
        role=role,
        is_active=is_active,
        password_hash=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _set_permission(db: Session, role: str, resource: str, **actions) -> RolePermission:
    row = db.query(RolePermission).filter(
        RolePermission.role == role,
        RolePermission.resource == resource,
    ).first()
    if row is None:
        row = RolePermission(role=role, resource=resource)
        db.add(row)
    row.actions = {
        "create": actions.get("create", False),
        "read": actions.get("read", False),
        "update": actions.get("update", False),
        "delete": actions.get("delete", False),
    }
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def admin_user(db: Session):
    return make_user(db, "admin", "admin")


@pytest.fixture
def mod_user(db: Session):
    return make_user(db, "moderator", "mod")


@pytest.fixture
def gc_user(db: Session):
    return make_user(db, "contractor", "gc")


@pytest.fixture
def viewer_user(db: Session):
    return make_user(db, "viewer", "view_only")


@pytest.fixture
def grant(db: Session):
    """Create or replace one permission row; unspecified actions are False"""
    def _grant(role: str, resource: str, **actions) -> RolePermission:
        return _set_permission(db, role, resource, **actions)
    return _grant


@pytest.fixture
def default_permissions(db: Session):
    seed_permissions(db)


@pytest.fixture
def user_factory(db: Session):
    def _make(username: str, role: str, **kwargs) -> User:
        return make_user(db, username, role, **kwargs)
    return _make
