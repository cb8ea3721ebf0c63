# lyrics_insight/schemas/common.py
from pydantic import BaseModel
from typing import List, Optional


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: str
    details: Optional[List[FieldError]] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    provider_configured: bool
    stored_analyses: int
