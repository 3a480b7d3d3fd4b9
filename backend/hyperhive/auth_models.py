"""Signup, login and token payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from .learner_models import CamelInputModel


class SignupRequest(CamelInputModel):
    # Fields default to empty so the route can answer with its own 400 messages.
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""


class LoginRequest(CamelInputModel):
    email: str = ""
    password: str = ""


class UserPayload(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    created_at: datetime


class AuthPayload(BaseModel):
    token: str
    user: UserPayload
    expires_at: datetime


__all__ = ["AuthPayload", "LoginRequest", "SignupRequest", "UserPayload"]
