"""Pydantic models for environment detection."""

from __future__ import annotations

from pydantic import BaseModel


class DetectionError(Exception):
    """The local environment could not provide a required fact."""


class RubyEnvironment(BaseModel):
    wrapper_path: str  # what `which ruby` resolves to, usually a shim
    interpreter_path: str
    version: str


class DatabaseCredentials(BaseModel):
    host: str
    port: str
    user: str
