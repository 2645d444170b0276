"""
Exchange API endpoint.

Routes:
- POST /exchange - Ask one question against the session's quota

Status codes: 200 answered, 403 limit reached, 422 invalid input,
502 inference failed, 503 store unavailable or counter conflict. Error
bodies carry the pre-request usage numbers.

Dependencies: convoquota.application.services.exchange_service, convoquota.models
System role: Exchange HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from convoquota.api.deps import get_account_id, get_exchange_service
from convoquota.application.services.exchange_service import (
    ExchangeService,
    ExchangeStatus,
)
from convoquota.core.exceptions import ConvoQuotaException, ValidationError
from convoquota.models.exchange import (
    ExchangeDeniedResponse,
    ExchangeErrorResponse,
    ExchangeRequest,
    ExchangeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["exchange"])

GENERIC_FAILURE_MESSAGE = "Failed to process message"


@router.post(
    "/exchange",
    response_model=ExchangeResponse,
    responses={
        403: {"model": ExchangeDeniedResponse},
        502: {"model": ExchangeErrorResponse},
        503: {"model": ExchangeErrorResponse},
    },
)
async def post_exchange(
    request: ExchangeRequest,
    account_id: str | None = Depends(get_account_id),
    exchange_service: ExchangeService = Depends(get_exchange_service),
):
    """
    Process one question.

    Args:
        request: ExchangeRequest with session id and message
        account_id: Account resolved from the Authorization header
        exchange_service: Injected ExchangeService

    Returns:
        ExchangeResponse, or a JSON error body with the matching status code

    Raises:
        HTTPException(422): Invalid input
    """
    try:
        result = await exchange_service.process_exchange(
            session_id=request.session_id,
            message=request.message,
            account_id=account_id,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except ConvoQuotaException as e:
        logger.exception(f"{__name__}:post_exchange - exchange failed: {type(e).__name__}")
        body = ExchangeErrorResponse(
            error=GENERIC_FAILURE_MESSAGE,
            usage_count=e.details.get("usage_count"),
            remaining=e.details.get("remaining"),
        )
        return JSONResponse(status_code=503, content=body.model_dump())

    if result.status is ExchangeStatus.DENIED:
        body = ExchangeDeniedResponse(error=result.answer_text, usage_count=result.usage_count)
        return JSONResponse(status_code=403, content=body.model_dump())

    if result.status is ExchangeStatus.FAILED:
        body = ExchangeErrorResponse(
            error=result.answer_text,
            usage_count=result.usage_count,
            remaining=result.remaining,
        )
        return JSONResponse(status_code=502, content=body.model_dump())

    return ExchangeResponse(
        answer_text=result.answer_text,
        usage_count=result.usage_count,
        remaining=result.remaining,
        billable=result.billable,
    )
