"""Health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: str
    version: str
    database: Literal["connected", "disconnected"]
    superadmin_configured: bool | None = Field(
        default=None,
        description="Whether the first super-admin exists; unknown while the database is unreachable",
    )
