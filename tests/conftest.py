import sys
import os
import pytest

# Add the project root to the Python path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Tests run against a private in-memory database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

# Initialize logging module before importing other modules
from utils.logging import SessionLogger
SessionLogger.start_session("tests")

from fastapi.testclient import TestClient

from db.database import SessionLocal, engine, Base
from db import models, crud

# Register custom markers
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test that exercises the HTTP API"
    )

@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(setup_database):
    """Provides a SQLAlchemy session for tests"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def override_get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(setup_database):
    from api.main import app
    from db.database import get_db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def novel(db_session):
    return crud.create_novel(db_session, "The Long Road", "A journey north")

@pytest.fixture
def chapter(db_session, novel):
    return crud.create_chapter(
        db_session,
        novel.id,
        "Arrival",
        '"Hello there," said Mary. John walked to the door. John walked to the window. '
        'They arrived at the Silver Gate. The ancient sword glowed faintly.',
        order_index=0
    )
