import os
import tempfile

# Settings are read at import time, so the environment must be in place first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="roomierules-uploads-"))
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from jose import jwt

from roomierules.config import settings
from roomierules.core.security import create_access_token, hash_password
from roomierules.database import Database, get_db
from roomierules.dependencies import get_receipt_storage
from roomierules.models.house import House
from roomierules.models.role import UserRole
from roomierules.models.user import User
from roomierules.storage.receipts import ReceiptStorage
# Import FastAPI app AFTER model imports
from roomierules.main import app

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def test_db():
    """Fresh in-memory database for each test"""
    database = Database("sqlite:///:memory:")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture(scope="function")
def db_session(test_db):
    db = test_db.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def receipt_storage(tmp_path):
    """Receipt storage rooted in the test's temporary directory"""
    return ReceiptStorage(tmp_path / "uploads", settings.MAX_RECEIPT_SIZE)


@pytest.fixture(scope="function")
def client(db_session, receipt_storage):
    """FastAPI test client with test database and upload directory"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_receipt_storage] = lambda: receipt_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_user(
    db,
    name: str,
    role: UserRole = UserRole.ROOMMATE,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    house: House | None = None,
) -> User:
    """Insert a user directly, bypassing the API"""
    user = User(
        email=email or f"{name.lower()}@roomie.io",
        password_hash=hash_password(password),
        name=name,
        role=role,
        house_id=house.id if house else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    """Authorization headers carrying a valid token for user"""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def create_test_token(sub="1", expired: bool = False, with_exp: bool = True) -> str:
    """
    Generate a JWT with arbitrary claims for token validation tests.

    Args:
        sub: Value of the 'sub' claim (None leaves it out)
        expired: If True, create expired token
        with_exp: If False, leave out the 'exp' claim
    """
    now = datetime.now(UTC)
    payload = {"iat": now}
    if sub is not None:
        payload["sub"] = sub
    if with_exp:
        payload["exp"] = now - timedelta(minutes=5) if expired else now + timedelta(minutes=15)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def host(db_session):
    """Host user without a house"""
    return create_user(db_session, "Hannah", role=UserRole.HOST)


@pytest.fixture
def house(db_session, host):
    """House owned by host, with a fixed join code"""
    house = House(name="Maple Street", house_code="MAPLE1", host_id=host.id)
    db_session.add(house)
    db_session.flush()
    host.house_id = house.id
    host.bank_account = "DE89 3704 0044 0532 0130 00"
    db_session.commit()
    db_session.refresh(house)
    return house


@pytest.fixture
def roommate(db_session, house):
    """Roommate who has joined house"""
    return create_user(db_session, "Rita", house=house)


@pytest.fixture
def second_roommate(db_session, house):
    return create_user(db_session, "Sam", house=house)


@pytest.fixture
def outsider(db_session):
    """Roommate living in a different house"""
    other_host = create_user(db_session, "Otto", role=UserRole.HOST)
    other_house = House(name="Elm Court", house_code="ELM999", host_id=other_host.id)
    db_session.add(other_house)
    db_session.flush()
    other_host.house_id = other_house.id
    db_session.commit()
    return create_user(db_session, "Olga", house=other_house)


@pytest.fixture
def host_headers(host, house):
    return headers_for(host)


@pytest.fixture
def roommate_headers(roommate):
    return headers_for(roommate)
