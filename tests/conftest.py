"""Shared fixtures for API tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from parlaydesk.agents.suggestions import SuggestionReconciler
from parlaydesk.api import deps
from parlaydesk.api.server import app
from parlaydesk.data.odds_client import OddsApiClient
from parlaydesk.db.models import Base


class StubGateway:
    """Text gateway returning a canned response."""

    def __init__(self, text: str = "", available: bool = True) -> None:
        self.text = text
        self.available = available
        self.prompts: list[str] = []

    def is_available(self) -> bool:
        return self.available

    def complete(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        return self.text


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)
    engine.dispose()


@pytest.fixture()
def gateway() -> StubGateway:
    return StubGateway(available=False)


@pytest.fixture()
def client(session_factory: sessionmaker, gateway: StubGateway) -> Iterator[TestClient]:
    def _db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = _db
    app.dependency_overrides[deps.get_reconciler] = lambda: SuggestionReconciler(gateway)
    app.dependency_overrides[deps.get_odds_client] = lambda: OddsApiClient(api_key="")
    yield TestClient(app)
    app.dependency_overrides.clear()
