import hashlib
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext

DEFAULT_SECRET_KEY = "dev-secret-unsafe"
ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class JWTAuthAdapter:
    """Auth adapter that signs session tokens as JWTs and hashes passwords with argon2."""

    def __init__(self, secret_key: str = DEFAULT_SECRET_KEY) -> None:
        self.secret_key = secret_key

    # --- Passwords ---

    def hash_password(self, password: str) -> str:
        result: str = pwd_context.hash(password)
        return result

    def verify_password(self, plain: str, hashed: str) -> bool:
        try:
            result: bool = pwd_context.verify(plain, hashed)
        except ValueError:
            # Stored value is not a recognised hash
            return False
        return result

    # --- Tokens ---

    def hash_token(self, token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def create_token(
        self,
        user_id: Any,
        session_id: str,
        ttl_minutes: int,
        now_utc: datetime | None = None,
    ) -> str:
        """
        Create a signed session token.

        Args:
            user_id: Owner of the session, stored as `sub`
            session_id: Server-side session id, stored as `sid`
            ttl_minutes: Lifetime of the token
            now_utc: Issue time (for testing/determinism). Defaults to datetime.now(UTC).
        """
        issued_at = now_utc if now_utc is not None else datetime.now(UTC)
        claims = {
            "sub": str(user_id),
            "sid": session_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=ttl_minutes),
        }
        encoded: str = jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)
        return encoded

    def decode_token(self, token: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            return None
        return cast(dict[str, Any], payload)

    def validate_token(self, token: str) -> dict[str, str] | None:
        """Return the `sub` and `sid` claims, or None if the token is invalid or expired."""
        payload = self.decode_token(token)
        if not payload:
            return None
        sub = payload.get("sub")
        sid = payload.get("sid")
        if not isinstance(sub, str) or not isinstance(sid, str):
            return None
        return {"sub": sub, "sid": sid}
