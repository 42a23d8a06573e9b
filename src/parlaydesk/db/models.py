"""ORM models for ParlayDesk."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base declarative class."""


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    preferences: Mapped[Preference | None] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False
    )
    parlays: Mapped[list[Parlay]] = relationship(back_populates="user", cascade="all, delete-orphan")
    sessions: Mapped[list[AuthSession]] = relationship(back_populates="user", cascade="all, delete-orphan")
    suggestion_history: Mapped[list[SuggestionHistory]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


class AuthSession(Base):
    """Server-side session keyed by an opaque token."""

    __tablename__ = "auth_sessions"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    user: Mapped[User] = relationship(back_populates="sessions")


class Preference(Base):
    """Per-user suggestion preferences; replaced wholesale on update."""

    __tablename__ = "preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)
    favorite_teams: Mapped[list[str]] = mapped_column(JSON, default=list)
    bet_types: Mapped[list[str]] = mapped_column(
        JSON, default=lambda: ["moneyline", "spread", "totals"]
    )
    risk_tolerance: Mapped[str] = mapped_column(String(32), default="moderate")
    bankroll: Mapped[float] = mapped_column(Float, default=0.0)
    team_focus: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    avoid_teams: Mapped[list[str]] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="preferences")


class Parlay(Base):
    """A saved parlay with its priced snapshot."""

    __tablename__ = "parlays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    legs: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    estimated_odds: Mapped[float] = mapped_column(Float, nullable=False)
    american_odds: Mapped[str] = mapped_column(String(16), nullable=False)
    estimated_payout: Mapped[float] = mapped_column(Float, nullable=False)
    stake: Mapped[float] = mapped_column(Float, nullable=False, default=10.0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="saved")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="parlays")


class SuggestionHistory(Base):
    """Append-only log of analysed leg sets."""

    __tablename__ = "suggestion_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    legs: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    analysis: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="suggestion_history")
