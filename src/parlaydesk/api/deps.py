"""FastAPI dependencies: database sessions, identity and gateways."""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from parlaydesk.agents.llm_client import LLMClient
from parlaydesk.agents.suggestions import SuggestionReconciler
from parlaydesk.auth.sessions import resolve_session
from parlaydesk.config import Settings, get_settings
from parlaydesk.data.odds_client import OddsApiClient
from parlaydesk.data.stats_client import StatsClient
from parlaydesk.db.database import SessionLocal
from parlaydesk.db.models import User

TOKEN_COOKIE = "token"


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SessionDep = Annotated[Session, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def request_token(request: Request) -> str | None:
    """Session token from the cookie, else from an ``Authorization: Bearer`` header."""

    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def optional_user(request: Request, db: SessionDep) -> User | None:
    token = request_token(request)
    if not token:
        return None
    return resolve_session(db, token)


def current_user(request: Request, db: SessionDep) -> User:
    token = request_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    user = resolve_session(db, token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")
    return user


OptionalUserDep = Annotated[User | None, Depends(optional_user)]
UserDep = Annotated[User, Depends(current_user)]


@lru_cache(maxsize=1)
def get_llm_client() -> LLMClient:
    return LLMClient.from_settings()


def get_reconciler(settings: SettingsDep) -> SuggestionReconciler:
    return SuggestionReconciler(
        get_llm_client(),
        max_tokens=settings.suggestion_max_tokens,
        analysis_max_tokens=settings.analysis_max_tokens,
    )


def get_odds_client() -> OddsApiClient:
    return OddsApiClient()


def get_stats_client() -> Iterator[StatsClient]:
    with StatsClient() as client:
        yield client


ReconcilerDep = Annotated[SuggestionReconciler, Depends(get_reconciler)]
OddsClientDep = Annotated[OddsApiClient, Depends(get_odds_client)]
StatsClientDep = Annotated[StatsClient, Depends(get_stats_client)]
