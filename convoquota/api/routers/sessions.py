"""
Session API endpoints.

Routes:
- POST /session - Get or create a session and report its quota
- GET /session/{session_id}/history - Get the rolling history
- POST /session/{session_id}/email - Leave a contact email on the session

Dependencies: convoquota.application.services.session_service, convoquota.models
System role: Session management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from convoquota.api.deps import get_account_id, get_session_service
from convoquota.application.services.session_service import SessionService
from convoquota.core.exceptions import SessionNotFoundError, StoreUnavailableError, ValidationError
from convoquota.models.session import (
    CaptureEmailRequest,
    CaptureEmailResponse,
    HistoryEntryResponse,
    OpenSessionRequest,
    SessionHistoryResponse,
    SessionStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["sessions"])


@router.post("", response_model=SessionStatusResponse)
async def open_session(
    request: OpenSessionRequest,
    account_id: str | None = Depends(get_account_id),
    session_service: SessionService = Depends(get_session_service),
) -> SessionStatusResponse:
    """
    Get or create a session, linking it when a valid bearer is present.

    Args:
        request: OpenSessionRequest with the client-held session id
        account_id: Account resolved from the Authorization header
        session_service: Injected SessionService

    Returns:
        SessionStatusResponse: Usage and remaining quota

    Raises:
        HTTPException(422): Invalid session id
        HTTPException(503): Store unavailable
    """
    try:
        status = await session_service.open_session(request.session_id, account_id=account_id)
        return SessionStatusResponse(**status)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except StoreUnavailableError:
        logger.exception(f"{__name__}:open_session - store unavailable")
        raise HTTPException(status_code=503, detail="Failed to initialize session")


@router.get("/{session_id}/history", response_model=SessionHistoryResponse)
async def get_session_history(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SessionHistoryResponse:
    """
    Get the rolling history for a session.

    Raises:
        HTTPException(404): Session not found
        HTTPException(503): Store unavailable
    """
    try:
        entries = await session_service.get_history(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StoreUnavailableError:
        logger.exception(f"{__name__}:get_session_history - store unavailable")
        raise HTTPException(status_code=503, detail="Failed to load history")

    messages = [HistoryEntryResponse(**entry) for entry in entries]
    return SessionHistoryResponse(messages=messages, total=len(messages))


@router.post("/{session_id}/email", response_model=CaptureEmailResponse)
async def capture_email(
    session_id: str,
    request: CaptureEmailRequest,
    session_service: SessionService = Depends(get_session_service),
) -> CaptureEmailResponse:
    """
    Leave a contact email on a session.

    Raises:
        HTTPException(404): Session not found
        HTTPException(422): Invalid email
        HTTPException(503): Store unavailable
    """
    try:
        await session_service.capture_email(session_id, request.email)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StoreUnavailableError:
        logger.exception(f"{__name__}:capture_email - store unavailable")
        raise HTTPException(status_code=503, detail="Failed to capture email")
    return CaptureEmailResponse()
