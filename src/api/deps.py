import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.auth_utils import TOKEN_COOKIE, token_from_cookie, user_id_from_token
from src.app_shell.context import ServiceContext
from src.domain.entities import Actor, Authenticated, Guest, User
from src.rules.loader import load_rules, rules_path_from_env
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("BLOG_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "blog.db")
        self.rules_path = rules_path_from_env(self.base_dir)
        self.run_worker = os.environ.get("BLOG_RUN_WORKER", "0") == "1"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: str) -> Rules:
    return load_rules(Path(path))


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(str(settings.rules_path))


# --- Services ---
def get_context(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> ServiceContext:
    return ServiceContext.create(settings.db_path, rules)


def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User | None:
    """The signed-in user, or None when no credentials were sent."""
    # Cookie (HttpOnly) wins over the Authorization header
    token = token_from_cookie(request.cookies.get(TOKEN_COOKIE)) or token
    if not token:
        return None

    # Bad credentials are an error, not a guest
    uid = user_id_from_token(token)
    if uid is None:
        raise _unauthorized("Invalid token")

    user = user_repo.get_by_id(uid)
    if not user:
        raise _unauthorized("User not found")

    return user


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    if user is None:
        raise _unauthorized("Not authenticated")
    return user


async def get_actor(user: User | None = Depends(get_optional_user)) -> Actor:
    """Authenticated(user) when signed in, Guest otherwise."""
    if user is None:
        return Guest()
    return Authenticated(user)
