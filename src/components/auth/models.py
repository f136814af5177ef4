from dataclasses import dataclass

from src.domain.entities import Session, User


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class CreateSessionInput:
    user: User
    ttl_minutes: int = 60 * 24
    # Token the client presented before logging in; invalidated on rotation.
    previous_token: str | None = None


@dataclass
class VerifySessionInput:
    token: str


@dataclass
class LogoutInput:
    token: str | None


@dataclass
class AuthOutput:
    user: User | None = None
    session: Session | None = None
    token_raw: str | None = None
    success: bool = False
    error: str | None = None
    code: str | None = None
