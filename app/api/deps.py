"""Dependencies exposing objects built at startup (stored on app.state) and request bodies."""

import json
from collections.abc import Awaitable, Callable
from typing import TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from app.core.config import Settings
from app.core.security import TokenIssuer

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def _read_body_fields(request: Request) -> object:
    """
    Return the decoded request body: form fields for HTML form posts,
    the decoded JSON document otherwise. An empty body or JSON null is {}.
    """
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": str(e), "input": None}]
        ) from e
    return {} if data is None else data


def body_of(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Dependency factory: parse a JSON or form-encoded body into model."""

    async def dependency(request: Request) -> ModelT:
        data = await _read_body_fields(request)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError(e.errors()) from e

    return dependency
