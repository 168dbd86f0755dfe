"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for GET /health: process status and database reachability."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: Literal["dev", "prod"] = Field(description="APP_ENV of the running process")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against DATABASE_URL",
    )
