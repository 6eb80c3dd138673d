"""Pydantic schemas for API responses."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


class ReadyResponse(HealthResponse):
    """Readiness response, with the size of the loaded rule table."""

    rule_count: int
