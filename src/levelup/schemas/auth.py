"""Pydantic schemas for the login endpoint."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Credentials submitted from the login screen."""

    username: str
    password: str
