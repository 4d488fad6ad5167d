"""
Pydantic response models for the HTTP surface.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "degraded"] = Field(..., description="Overall status")
    version: str = Field(..., description="Application version")
    bot_running: bool = Field(..., description="Whether Telegram polling is active")
    conversations: int = Field(..., description="Conversations with connected accounts")


class AuthStatusResponse(BaseModel):
    """Whether a conversation holds Google credentials."""

    conversation_id: int
    connected: bool
    email: Optional[str] = None
    provider: str = "google"


class AuthCallbackResponse(BaseModel):
    """Result of the OAuth redirect."""

    success: bool
    message: str
