"""
API Request and Response Schemas

Entries themselves are returned as shortlink.db.models.UrlEntry, which
serializes to:

    {"short_url": ..., "long_url": ..., "note": ..., "visit_count": ..., "last_visit": ...}
"""

from pydantic import BaseModel, Field


class CreateUrlRequest(BaseModel):
    """Request body for creating a short URL."""
    long_url: str = Field(..., description="Redirect target, stored as given")
    note: str = Field(default="", description="Free-text note kept with the entry")


class ServiceInfoResponse(BaseModel):
    """Response model for the root endpoint."""
    message: str
    version: str
    docs: str


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str
    entries: int
