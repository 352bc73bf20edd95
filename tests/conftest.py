# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SYNC_ADMIN_PASSWORD"] = "test-admin-password"  # noqa: S105
os.environ["SYNC_ENABLED"] = "0"
os.environ["AUTO_CREATE_TABLES"] = "0"

from src.database import get_db
from src.main import app
from src.models.base import Base
from src.services.sync_scheduler import CurrencySyncScheduler

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SAMPLE_FEED = """<?xml version="1.0" encoding="windows-1251"?>
<ValCurs Date="02.03.2024" name="Foreign Currency Market">
<Valute ID="R01235">
<NumCode>840</NumCode>
<CharCode>USD</CharCode>
<Nominal>1</Nominal>
<Name>Доллар США</Name>
<Value>75,5000</Value>
<VunitRate>75.5000</VunitRate>
</Valute>
<Valute ID="R01239">
<NumCode>978</NumCode>
<CharCode>EUR</CharCode>
<Nominal>1</Nominal>
<Name>Евро</Name>
<Value>90,0000</Value>
<VunitRate>90,0000</VunitRate>
</Valute>
</ValCurs>
"""


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Session factory bound to the test database."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def feed_xml() -> str:
    """Daily feed document with a USD and a EUR entry."""
    return SAMPLE_FEED


@pytest.fixture
def feed_bytes(feed_xml) -> bytes:
    """Daily feed document as served, in windows-1251."""
    return feed_xml.encode("windows-1251")


@pytest.fixture(autouse=True)
def reset_scheduler():
    """Make sure no scheduler singleton leaks between tests."""
    yield
    CurrencySyncScheduler.reset_instance()
