import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.auth_utils import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    TOKEN_COOKIE,
    cookie_value,
    create_user_token,
    verify_password,
)
from src.api.deps import get_current_user, get_user_repo
from src.api.schemas import UserResponse
from src.domain.entities import User

logger = logging.getLogger(__name__)

router = APIRouter()


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", response_model=Token)
def login(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> Token:
    """Exchange email and password for a bearer token, also set as a cookie."""
    user = user_repo.get_by_email(form_data.username)
    if user is None or not verify_password(form_data.password, user.password_hash):
        logger.info("Failed login for %s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_user_token(user.id)
    max_age = ACCESS_TOKEN_EXPIRE_MINUTES * 60
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=cookie_value(token),
        httponly=True,
        max_age=max_age,
        expires=max_age,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )
    return Token(access_token=token)


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    response.delete_cookie(key=TOKEN_COOKIE)
    return {"status": "success"}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> User:
    return current_user
