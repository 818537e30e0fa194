"""Error response body shared by all endpoints."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    code: int = Field(..., description="HTTP status code")
    kind: str = Field(
        ..., description="bad-request, unauthorized, forbidden, not-found or internal"
    )
    message: str
