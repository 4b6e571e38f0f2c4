from pydantic import BaseModel
from typing import Any, Dict, Optional


class ValidSubmission(BaseModel):
    name: str
    email: str
    message: str


class ContactResponse(BaseModel):
    success: bool
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
    # Populated only when the search dispatcher is active
    search: Optional[Dict[str, Any]] = None
