"""Pydantic schemas for operator settings."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.schema.content import FetchSettings


class ApiKeyRequest(BaseModel):
    api_key: str = Field(..., min_length=1)


class SettingsResponse(BaseModel):
    fetch: FetchSettings
    api_key_configured: bool
