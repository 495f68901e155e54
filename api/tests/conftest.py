import os

# Run against no real collaborators; individual tests opt in via overrides
os.environ["DATABASE_URL"] = ""
os.environ["DISCORD_BOT_TOKEN"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["DASHBOARD_PASSWORD_HASH"] = ""
os.environ["DASHBOARD_TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dashboard.main import app
from dashboard.db import Base, get_db, get_optional_db


@pytest.fixture
def client():
    """Test client with dependency overrides reset afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """In-memory SQLite session wired into both database dependencies."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()

    def override():
        yield session

    app.dependency_overrides[get_db] = override
    app.dependency_overrides[get_optional_db] = override

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_optional_db, None)
