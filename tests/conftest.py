"""Shared fixtures: a fresh in-memory store per test and an API client bound to it."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from roombooking import config
from roombooking.app import app
from roombooking.db import get_session, init_db, make_engine
from roombooking.seed import seed

from helpers import DAY


@pytest.fixture(autouse=True)
def no_latency(monkeypatch):
    monkeypatch.setattr(config, "LATENCY_SCALE", 0.0)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def seeded(session):
    seed(session, today=DAY)
    return session


@pytest.fixture
def client(engine):
    def override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client, engine):
    with Session(engine) as s:
        seed(s, today=DAY)
    return client
