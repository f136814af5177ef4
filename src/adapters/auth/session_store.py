"""In-memory session store adapter.

Sessions are keyed by the SHA-256 hash of the issued token, so the raw
token never sits in the store. Suitable for single-process deployments.
"""

from uuid import UUID

from src.domain.entities import Session


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, token_hash: str) -> Session | None:
        return self._sessions.get(token_hash)

    def save(self, token_hash: str, session: Session) -> None:
        self._sessions[token_hash] = session

    def delete(self, token_hash: str) -> None:
        self._sessions.pop(token_hash, None)

    def delete_by_user(self, user_id: UUID) -> int:
        """Delete all sessions for a user. Returns count deleted."""
        to_remove = [k for k, v in self._sessions.items() if str(v.user_id) == str(user_id)]
        for token_hash in to_remove:
            del self._sessions[token_hash]
        return len(to_remove)

    def clear(self) -> None:
        """Clear all sessions - useful for testing."""
        self._sessions.clear()
