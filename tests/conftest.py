import pytest
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTH_RATE_LIMIT"] = "1000/minute"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="leavedesk-uploads-"))

from leavedesk.core.config import settings
from leavedesk.database import Base, get_db
from leavedesk.dependencies import get_file_store
from leavedesk.main import app
from leavedesk.models.department import Department
from leavedesk.models.user import User, UserRole
from leavedesk.core import security
from leavedesk.services.file_store import LocalFileStore
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# pysqlite defers BEGIN on its own; take over so SAVEPOINTs behave.
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None

@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """
    A session joined to an outer transaction that is rolled back after the test.
    Service commits and rollbacks only touch a savepoint.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    yield session

    session.close()
    transaction.rollback()
    connection.close()

def _make_user(db_session, email, name, role, department=None, employee_id="", password="Password123!"):
    user = User(
        email=email,
        hashed_password=security.get_password_hash(password),
        name=name,
        role=role,
        department=department,
        employee_id=employee_id,
    )
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture(scope="function")
def staff_user(db_session):
    """A staff member in IT with no employee ID on file yet."""
    return _make_user(db_session, "staff@example.com", "Sam Staff", UserRole.STAFF, Department.IT)

@pytest.fixture(scope="function")
def other_staff_user(db_session):
    return _make_user(db_session, "other@example.com", "Olive Other", UserRole.STAFF, Department.SALES, employee_id="EMP-200")

@pytest.fixture(scope="function")
def director_user(db_session):
    return _make_user(db_session, "director@example.com", "Dana Director", UserRole.DIRECTOR)

@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture building bearer headers for a user."""
    def _auth_headers(user):
        token = security.create_access_token({"sub": user.id, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

@pytest.fixture(scope="function")
def upload_root():
    """A per-test folder inside the directory the app serves documents from."""
    root = Path(settings.upload_dir) / uuid.uuid4().hex
    yield root
    shutil.rmtree(root, ignore_errors=True)

@pytest.fixture(scope="function")
def client(db_session, upload_root):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_store] = lambda: LocalFileStore(str(upload_root), f"{settings.upload_base_url}/{upload_root.name}")
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
