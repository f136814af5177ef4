import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import DEFAULT_SECRET_KEY, JWTAuthAdapter
from src.adapters.auth.session_store import InMemorySessionStore
from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLitePostRepo, SQLiteUserRepo
from src.components.auth import VerifySessionInput, run_verify_session
from src.domain.entities import User
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = PROJECT_ROOT
        self.data_dir = Path(os.environ.get("POSTBOARD_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "postboard.db")
        self.migrations_dir = self.base_dir / "migrations"
        self.rules_path = Path(
            os.environ.get("POSTBOARD_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.secret_key = os.environ.get("POSTBOARD_SECRET_KEY", DEFAULT_SECRET_KEY)
        self.log_level = os.environ.get("POSTBOARD_LOG_LEVEL", "INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Repos ---
def get_post_repo(settings: Settings = Depends(get_settings)) -> SQLitePostRepo:
    return SQLitePostRepo(settings.db_path)


def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


# --- Adapters ---
def get_auth_adapter(settings: Settings = Depends(get_settings)) -> JWTAuthAdapter:
    return JWTAuthAdapter(settings.secret_key)


# Session store singleton for the auth component
_session_store_instance: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get session store singleton."""
    global _session_store_instance
    if _session_store_instance is None:
        _session_store_instance = InMemorySessionStore()
    return _session_store_instance


_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login", auto_error=False)


def get_session_token(
    request: Request,
    bearer: Annotated[str | None, Depends(oauth2_scheme)],
    rules: Rules = Depends(get_rules),
) -> str | None:
    """Session token from the session cookie, falling back to an Authorization header."""
    cookie_token = request.cookies.get(rules.sessions.cookie.name)
    if cookie_token:
        return cookie_token
    return bearer


def get_optional_user(
    token: str | None = Depends(get_session_token),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    session_store: InMemorySessionStore = Depends(get_session_store),
    clock: SystemClock = Depends(get_clock),
) -> User | None:
    if not token:
        return None

    result = run_verify_session(
        VerifySessionInput(token=token),
        user_repo=user_repo,
        auth_adapter=auth_adapter,
        session_store=session_store,
        time=clock,
    )
    return result.user if result.success else None


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
