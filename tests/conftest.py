from datetime import datetime, timedelta
from pathlib import Path

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.app_shell.context import ServiceContext
from src.domain.entities import User
from src.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent
RULES_PATH = PROJECT_ROOT / "rules.yaml"

T0 = datetime(2026, 1, 1, 12, 0, 0)


class FakeClock:
    """Settable clock for deterministic scheduling tests."""

    def __init__(self, now: datetime = T0) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "blog.db")
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def ctx(db_path, rules, clock):
    """
    Creates a full ServiceContext backed by a temporary SQLite DB and a fake clock.
    """
    return ServiceContext.create(db_path, rules, clock=clock)


@pytest.fixture
def make_user(ctx):
    def _make(email: str, admin: bool = False, password_hash: str = "") -> User:
        user = User(
            email=email,
            display_name=email.split("@")[0],
            password_hash=password_hash,
            admin=admin,
        )
        ctx.user_repo.save(user)
        return user

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", admin=True)


# --- API ---


@pytest.fixture
def client(ctx, db_path):
    from fastapi.testclient import TestClient

    from src.api.deps import Settings, get_context, get_settings
    from src.api.main import app

    def _settings():
        s = Settings()
        s.db_path = db_path
        s.rules_path = RULES_PATH
        return s

    app.dependency_overrides[get_settings] = _settings
    app.dependency_overrides[get_context] = lambda: ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    from src.api.auth_utils import create_access_token

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers
