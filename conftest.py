import os

# Must be set before tracky.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("RATE_LIMIT_WRITE", "10000/hour")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/hour")

from datetime import date

import pytest
from fastapi.testclient import TestClient

from tracky.database import Base, get_engine, get_session_local
from tracky.main import app


@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from empty tables."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_headers():
    return {"X-User-ID": "user-1"}


@pytest.fixture
def day():
    return date(2024, 1, 10)
