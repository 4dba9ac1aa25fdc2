"""
Pydantic models for API error responses.
"""
from typing import Dict, Any, Optional
from pydantic import BaseModel


class APIError(BaseModel):
    """API error response model."""
    success: bool = False
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
