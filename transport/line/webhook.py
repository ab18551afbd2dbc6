"""
LINE Webhook Receiver

FastAPI router that hands the raw request to the LINE bot use case and maps
its result to an HTTP status. No business logic. Pure transport.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from usecase.line_bot import LineBotUseCase
from usecase.types import UseCaseResult

from .security import LINE_SIGNATURE_HEADER

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["LINE Transport"])

STATUS_BY_RESULT: dict[UseCaseResult, int] = {
    UseCaseResult.OK: status.HTTP_200_OK,
    UseCaseResult.INVALID_SIGNATURE: status.HTTP_403_FORBIDDEN,
    UseCaseResult.INVALID_REQUEST: status.HTTP_401_UNAUTHORIZED,
    UseCaseResult.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_line_bot_use_case(request: Request) -> LineBotUseCase:
    """Use case built once at startup (see main.lifespan)."""
    return request.app.state.line_bot_use_case


@router.post("/line")
async def line_webhook_receiver(
    request: Request,
    use_case: LineBotUseCase = Depends(get_line_bot_use_case),
) -> JSONResponse:
    """
    Receive LINE webhook events.

    Status codes:
        200: processed
        401: missing body or x-line-signature header
        403: invalid signature
        500: unparseable envelope or any event failed

    The body is always {}.
    """

    raw_body = await request.body()
    try:
        body = raw_body.decode("utf-8") if raw_body else None
    except UnicodeDecodeError:
        logger.warning("Webhook body is not valid UTF-8")
        body = None

    signature = request.headers.get(LINE_SIGNATURE_HEADER)

    result = await use_case.execute(body, signature)
    status_code = STATUS_BY_RESULT[result]

    if result is UseCaseResult.OK:
        logger.debug("LINE webhook processed")
    else:
        logger.warning(f"LINE webhook finished with {result.value} ({status_code})")

    return JSONResponse(status_code=status_code, content={})
