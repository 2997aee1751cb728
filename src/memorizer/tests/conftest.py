"""Test configuration."""
import os
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Callable, Generator

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from memorizer.models.base import Base, init_db
from memorizer.models.srs_models import WordRecord

fake = Faker()


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory database shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def today() -> date:
    return date(2024, 3, 15)


@pytest.fixture
def make_record(today: date) -> Callable[..., WordRecord]:
    """Factory for word snapshots with fake text."""

    def _make(**overrides) -> WordRecord:
        record = WordRecord.new(fake.unique.word(), fake.word(), overrides.pop("created", today))
        return replace(record, **overrides)

    return _make


@pytest.fixture(autouse=True)
def reset_unique_words() -> Generator[None, None, None]:
    """Each test gets its own pool of unique fake words."""
    fake.unique.clear()
    yield
