from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import FixedClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLitePostRepo, SQLiteUserRepo
from src.api.deps import Settings, get_clock, get_session_store, get_settings
from src.api.main import app
from src.domain.entities import User

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """A freshly migrated SQLite database."""
    path = str(tmp_path / "postboard.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def settings(tmp_path: Path, db_path: str) -> Settings:
    s = Settings()
    s.data_dir = tmp_path
    s.db_path = db_path
    s.rules_path = PROJECT_ROOT / "rules.yaml"
    return s


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 6, 15, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def user_repo(db_path: str) -> SQLiteUserRepo:
    return SQLiteUserRepo(db_path)


@pytest.fixture
def post_repo(db_path: str) -> SQLitePostRepo:
    return SQLitePostRepo(db_path)


@pytest.fixture
def make_user(user_repo: SQLiteUserRepo) -> Callable[..., User]:
    def _make(
        email: str = "alice@example.com",
        password: str = DEFAULT_PASSWORD,
        name: str | None = None,
        status: str = "active",
    ) -> User:
        user = User(
            email=email,
            display_name=name or email.split("@")[0].title(),
            password_hash=JWTAuthAdapter().hash_password(password),
            status=status,  # type: ignore[arg-type]
        )
        return user_repo.save(user)

    return _make


@pytest.fixture
def api(settings: Settings, clock: FixedClock) -> Iterator[None]:
    """Point the app at the test database and the fixed clock."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock
    get_session_store().clear()
    yield
    app.dependency_overrides.clear()
    get_session_store().clear()


@pytest.fixture
def client(api: None) -> TestClient:
    return TestClient(app)


@pytest.fixture
def client_for(api: None) -> Callable[[User], TestClient]:
    """Build a separate client (own cookie jar) logged in as the given user."""

    def _login(user: User, password: str = DEFAULT_PASSWORD) -> TestClient:
        c = TestClient(app)
        resp = c.post("/login", json={"email": user.email, "password": password})
        assert resp.status_code == 200, resp.text
        return c

    return _login
