"""Signup and login endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import UserService
from .auth_models import AuthPayload, LoginRequest, SignupRequest
from .config import Settings, get_settings
from .db.session import get_session_dependency
from .errors import ServiceError, internal_error

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=AuthPayload)
def signup(
    request: SignupRequest,
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
):
    try:
        return UserService(session, settings).signup(request)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error during signup")
        return internal_error("complete signup", exc)


@router.post("/login", response_model=AuthPayload)
def login(
    request: LoginRequest,
    session: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
):
    try:
        return UserService(session, settings).login(request)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error during login")
        return internal_error("complete login", exc)


__all__ = ["router"]
