"""Shared fixtures: an in-memory store seeded with 5 spots + both barriers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("HARDWARE_ALLOWED_NETWORKS", "")
os.environ.setdefault("BARRIER_AUTO_CLOSE_SECONDS", "0")
os.environ.setdefault("REACTION_RETRY_BACKOFF_SECONDS", "0")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from parking_gate.database import create_tables
from parking_gate.services.change_feed import change_feed
from parking_gate.services.event_dispatcher import register_reactions
from parking_gate.services.seed_service import seed_parking_lot


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_parking_lot(session, 5)
    yield session
    session.close()


@pytest.fixture(autouse=True)
def no_reactions():
    """Reactions only run in tests that ask for the feed fixture."""
    change_feed.clear()
    yield
    change_feed.clear()


@pytest.fixture
def feed(session_factory):
    change_feed.bind(session_factory)
    register_reactions(change_feed)
    return change_feed
