"""
Authentication API routes for Google OAuth.

Google redirects the user here after consent. The callback exchanges the
code, connects the conversation's calendars and posts the calendar listing
back into the chat.

1. /auth/google/callback - Handle OAuth callback (exchange code for tokens)
2. /auth/status - Check if a conversation has connected a calendar
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.dependencies import Services, get_services
from src.api.models import AuthCallbackResponse, AuthStatusResponse
from src.services.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.get("/google/callback", response_model=AuthCallbackResponse)
async def google_callback(
    state: str = Query(..., description="State value issued by /auth"),
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    error: Optional[str] = Query(None, description="Error from Google OAuth"),
    services: Services = Depends(get_services),
) -> AuthCallbackResponse:
    """
    Handle the Google OAuth callback.

    Raises:
        HTTPException: 400 if the user denied access, the state is unknown,
            or the code exchange failed
    """
    if error or not code:
        logger.warning(f"OAuth error: {error or 'missing code'}")
        raise HTTPException(
            status_code=400,
            detail=f"OAuth authorization failed: {error or 'missing code'}",
        )

    try:
        conversation_id = await services.auth_service.complete_auth(state, code)
    except AuthorizationError as e:
        logger.warning(f"OAuth callback rejected: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)

    connected, replies = await services.controller.complete_authorization(conversation_id)
    if services.bot is not None:
        await services.bot.send_replies(conversation_id, replies)

    if not connected:
        logger.warning(f"[{conversation_id}] Authorized but calendars could not be connected")
        return AuthCallbackResponse(
            success=False,
            message="Google authorization succeeded but your calendars could not be "
            "loaded. Please run /auth again in the chat.",
        )

    return AuthCallbackResponse(
        success=True,
        message="Google Calendar connected. You can return to the chat.",
    )


@router.get("/status", response_model=AuthStatusResponse)
async def auth_status(
    conversation_id: int = Query(..., description="Chat id to check"),
    services: Services = Depends(get_services),
) -> AuthStatusResponse:
    """Check whether a conversation has stored Google credentials."""
    email = await services.auth_service.get_email(conversation_id)
    connected = email is not None or services.directory.is_authenticated(conversation_id)

    return AuthStatusResponse(
        conversation_id=conversation_id,
        connected=connected,
        email=email,
    )
