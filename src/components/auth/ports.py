from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Session, User


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None: ...
    def get_by_id(self, user_id: UUID) -> User | None: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_token(self, token: str) -> str: ...
    def create_token(self, user_id: object, session_id: str, ttl_minutes: int) -> str: ...
    def validate_token(self, token: str) -> dict[str, str] | None: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class SessionStorePort(Protocol):
    """Port for session storage. Keys are token hashes, never raw tokens."""

    def get(self, token_hash: str) -> Session | None: ...

    def save(self, token_hash: str, session: Session) -> None: ...

    def delete(self, token_hash: str) -> None: ...
