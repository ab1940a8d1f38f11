"""
schemas/common.py

Shared schemas.
- ErrorResponse: the JSON body every error handler in middlewares/error_handler.py returns,
  declared on the routers so Swagger documents it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class ErrorResponse(BaseModel):
    """
    Standard error body
    - error: human readable message
    - code: error kind (VALIDATION, NOT_FOUND, STATE, PERSISTENCE, INTERNAL_ERROR)
    - field / id: structured context when the error concerns one input field or one record
    """
    error: str = Field(..., description="Human readable error message")
    code: str = Field(..., description="Error kind, e.g. VALIDATION, NOT_FOUND")
    field: Optional[str] = Field(default=None, description="Offending input field, if any")
    id: Optional[int] = Field(default=None, description="Identifier the error refers to, if any")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response creation time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# error responses shared by the routers' OpenAPI declarations
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or illegal attendance transition"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    500: {"model": ErrorResponse, "description": "Database failure"},
}
