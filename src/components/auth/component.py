import logging
from datetime import timedelta
from uuid import UUID, uuid4

from src.domain.entities import Session

from .models import (
    AuthOutput,
    CreateSessionInput,
    LoginInput,
    LogoutInput,
    VerifySessionInput,
)
from .ports import AuthAdapterPort, SessionStorePort, TimePort, UserRepoPort

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _invalid_credentials() -> AuthOutput:
    return AuthOutput(success=False, error=INVALID_CREDENTIALS, code="invalid_credentials")


def _unauthenticated(reason: str) -> AuthOutput:
    return AuthOutput(success=False, error=reason, code="unauthenticated")


def run_login(
    inp: LoginInput, user_repo: UserRepoPort, auth_adapter: AuthAdapterPort
) -> AuthOutput:
    # Unknown email, wrong password and disabled account look identical to the caller.
    user = user_repo.get_by_email(inp.email)
    if not user:
        logger.info("Login failed for %s: unknown email", inp.email)
        return _invalid_credentials()

    if not auth_adapter.verify_password(inp.password, user.password_hash):
        logger.info("Login failed for %s: bad password", inp.email)
        return _invalid_credentials()

    if user.status != "active":
        logger.info("Login failed for %s: account %s", inp.email, user.status)
        return _invalid_credentials()

    return AuthOutput(user=user, success=True)


def run_create_session(
    inp: CreateSessionInput,
    auth_adapter: AuthAdapterPort,
    session_store: SessionStorePort,
    time: TimePort,
) -> AuthOutput:
    if inp.previous_token:
        session_store.delete(auth_adapter.hash_token(inp.previous_token))

    session_id = str(uuid4())
    token = auth_adapter.create_token(inp.user.id, session_id, inp.ttl_minutes)
    token_hash = auth_adapter.hash_token(token)
    now = time.now_utc()

    session = Session(
        id=session_id,
        user_id=inp.user.id,
        token_hash=token_hash,
        expires_at=now + timedelta(minutes=inp.ttl_minutes),
        created_at=now,
    )
    session_store.save(token_hash, session)
    logger.info("Session %s created for user %s", session_id, inp.user.id)
    return AuthOutput(user=inp.user, session=session, token_raw=token, success=True)


def run_verify_session(
    inp: VerifySessionInput,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    session_store: SessionStorePort,
    time: TimePort,
) -> AuthOutput:
    claims = auth_adapter.validate_token(inp.token)
    if not claims:
        return _unauthenticated("Invalid token")

    token_hash = auth_adapter.hash_token(inp.token)
    session = session_store.get(token_hash)
    if not session or session.id != claims["sid"]:
        return _unauthenticated("Session not found")

    if session.expires_at < time.now_utc():
        session_store.delete(token_hash)
        return _unauthenticated("Session expired")

    if str(session.user_id) != claims["sub"]:
        return _unauthenticated("Session mismatch")

    user = user_repo.get_by_id(UUID(claims["sub"]))
    if not user or user.status != "active":
        session_store.delete(token_hash)
        return _unauthenticated("User not found")

    return AuthOutput(user=user, session=session, success=True)


def run_logout(
    inp: LogoutInput,
    auth_adapter: AuthAdapterPort,
    session_store: SessionStorePort,
) -> AuthOutput:
    """Invalidate the presented session. Idempotent."""
    if inp.token:
        token_hash = auth_adapter.hash_token(inp.token)
        session = session_store.get(token_hash)
        session_store.delete(token_hash)
        if session:
            logger.info("Session %s closed for user %s", session.id, session.user_id)
    return AuthOutput(success=True)


def run(
    inp: LoginInput | CreateSessionInput | VerifySessionInput | LogoutInput,
    *,
    user_repo: UserRepoPort | None = None,
    auth_adapter: AuthAdapterPort | None = None,
    session_store: SessionStorePort | None = None,
    time: TimePort | None = None,
) -> AuthOutput:
    if isinstance(inp, LoginInput):
        assert user_repo and auth_adapter
        return run_login(inp, user_repo, auth_adapter)

    elif isinstance(inp, CreateSessionInput):
        assert auth_adapter and session_store and time
        return run_create_session(inp, auth_adapter, session_store, time)

    elif isinstance(inp, VerifySessionInput):
        assert user_repo and auth_adapter and session_store and time
        return run_verify_session(inp, user_repo, auth_adapter, session_store, time)

    elif isinstance(inp, LogoutInput):
        assert auth_adapter and session_store
        return run_logout(inp, auth_adapter, session_store)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
