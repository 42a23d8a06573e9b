"""Account, session and preference endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response, status

from parlaydesk.api.deps import TOKEN_COOKIE, SessionDep, SettingsDep, UserDep, request_token
from parlaydesk.api.schemas import Credentials, PreferencesPayload, UserResponse
from parlaydesk.auth.sessions import authenticate, create_session, register_user, revoke_session
from parlaydesk.config import Settings
from parlaydesk.db.models import Preference, User

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_response(user: User) -> UserResponse:
    preferences = PreferencesPayload.from_model(user.preferences) if user.preferences else PreferencesPayload()
    return UserResponse(id=user.id, email=user.email, created_at=user.created_at, preferences=preferences)


def _set_token_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.session_ttl_days * 24 * 60 * 60,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: Credentials, response: Response, session: SessionDep, settings: SettingsDep
) -> dict[str, object]:
    user = register_user(session, payload.email, payload.password)
    token = create_session(session, user, settings.session_ttl_days)
    session.commit()
    _set_token_cookie(response, token, settings)
    return {"user": _user_response(user).model_dump(by_alias=True), "token": token}


@router.post("/login")
def login(
    payload: Credentials, response: Response, session: SessionDep, settings: SettingsDep
) -> dict[str, object]:
    user = authenticate(session, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_session(session, user, settings.session_ttl_days)
    session.commit()
    _set_token_cookie(response, token, settings)
    return {"user": _user_response(user).model_dump(by_alias=True), "token": token}


@router.post("/logout")
def logout(request: Request, response: Response, session: SessionDep) -> dict[str, str]:
    token = request_token(request)
    if token:
        revoke_session(session, token)
        session.commit()
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Logged out"}


@router.get("/me")
def me(user: UserDep) -> dict[str, object]:
    return {"user": _user_response(user).model_dump(by_alias=True)}


@router.put("/preferences")
def update_preferences(payload: PreferencesPayload, user: UserDep, session: SessionDep) -> dict[str, object]:
    """Replace the stored preferences wholesale."""

    row = user.preferences
    if row is None:
        row = Preference()
        user.preferences = row
    row.favorite_teams = list(payload.favorite_teams)
    row.bet_types = list(payload.bet_types)
    row.risk_tolerance = payload.risk_tolerance
    row.bankroll = payload.bankroll
    row.team_focus = [item.model_dump(by_alias=True) for item in payload.team_focus]
    row.avoid_teams = list(payload.avoid_teams)
    session.commit()
    return {"message": "Preferences updated", "preferences": payload.model_dump(by_alias=True)}
