"""User registration and login endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import body_of, get_app_settings, get_token_issuer
from app.core.config import Settings
from app.core.database import get_db
from app.core.security import TokenIssuer
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserPublic,
)
from app.services.users import UserServiceError, login_user, register_user

logger = logging.getLogger(__name__)
router = APIRouter()

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
def post_register(
    body: Annotated[RegisterRequest, Depends(body_of(RegisterRequest))],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RegisterResponse | JSONResponse:
    """Create an account. The response never includes the password or refresh token."""
    try:
        user = register_user(
            db, body.email, body.password, bcrypt_rounds=settings.BCRYPT_ROUNDS
        )
        return RegisterResponse(user=UserPublic.model_validate(user))
    except UserServiceError as e:
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception("Registration failed")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": MessageResponse},
        401: {"model": MessageResponse},
        404: {"model": MessageResponse},
        500: {"model": MessageResponse},
    },
)
def post_login(
    body: Annotated[LoginRequest, Depends(body_of(LoginRequest))],
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> LoginResponse | JSONResponse:
    """
    Authenticate with email and password.

    Returns both tokens in the body and sets them as httpOnly cookies
    (accessToken, refreshToken).
    """
    try:
        result = login_user(db, issuer, body.email, body.password)
        payload = LoginResponse(
            user=UserPublic.model_validate(result.user),
            access_token=result.access_token,
            refresh_token=result.refresh_token,
        )
    except UserServiceError as e:
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception("Login failed")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    for name, value in (
        (ACCESS_TOKEN_COOKIE, result.access_token),
        (REFRESH_TOKEN_COOKIE, result.refresh_token),
    ):
        response.set_cookie(
            name,
            value,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite=settings.COOKIE_SAMESITE,
        )
    return payload
