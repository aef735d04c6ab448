from __future__ import annotations

import os

# flowly.config refuses to import without a database URL.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_TO_FILE"] = "0"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flowly.infra.db import Base
from flowly.infra import models  # noqa: F401
from flowly.infra.repository import TaskRepository


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture()
def session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture()
def repo(session) -> TaskRepository:
    return TaskRepository(session)
