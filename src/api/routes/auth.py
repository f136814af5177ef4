import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.session_store import InMemorySessionStore
from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import (
    get_auth_adapter,
    get_clock,
    get_current_user,
    get_rules,
    get_session_store,
    get_session_token,
    get_user_repo,
)
from src.api.schemas import LoginRequest, UserEnvelope, UserSummary
from src.components.auth import (
    CreateSessionInput,
    LoginInput,
    LogoutInput,
    run_create_session,
    run_login,
    run_logout,
)
from src.domain.entities import User
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=UserEnvelope)
def login(
    req: LoginRequest,
    response: Response,
    previous_token: str | None = Depends(get_session_token),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    session_store: InMemorySessionStore = Depends(get_session_store),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> UserEnvelope:
    """Authenticate with email and password and start a fresh session."""
    result = run_login(LoginInput(email=req.email, password=req.password), user_repo, auth_adapter)
    if not result.success or result.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error or "Invalid credentials",
        )

    sessions = rules.sessions
    session_out = run_create_session(
        CreateSessionInput(
            user=result.user,
            ttl_minutes=sessions.ttl_minutes,
            previous_token=previous_token if sessions.rotate_on_login else None,
        ),
        auth_adapter,
        session_store,
        clock,
    )
    assert session_out.token_raw is not None

    response.set_cookie(
        key=sessions.cookie.name,
        value=session_out.token_raw,
        httponly=sessions.cookie.http_only,
        max_age=sessions.ttl_minutes * 60,
        samesite=sessions.cookie.same_site,
        secure=sessions.cookie.secure,
    )
    logger.info("User %s logged in", result.user.id)
    return UserEnvelope(user=UserSummary.from_user(result.user))


@router.post("/logout", status_code=204)
def logout(
    token: str | None = Depends(get_session_token),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    session_store: InMemorySessionStore = Depends(get_session_store),
    rules: Rules = Depends(get_rules),
) -> Response:
    """End the current session (if any) and clear the cookie."""
    run_logout(LogoutInput(token=token), auth_adapter, session_store)

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(
        key=rules.sessions.cookie.name,
        httponly=rules.sessions.cookie.http_only,
        samesite=rules.sessions.cookie.same_site,
        secure=rules.sessions.cookie.secure,
    )
    return response


@router.get("/me", response_model=UserEnvelope)
def read_me(current_user: User = Depends(get_current_user)) -> UserEnvelope:
    """Get current user info."""
    return UserEnvelope(user=UserSummary.from_user(current_user))
