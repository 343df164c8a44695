"""Exception handlers mapping domain errors to HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from plangate.core.exceptions import InvalidStateError, NotFoundException
from plangate.core.logging import logger
from plangate.domains.plans.exceptions import InvalidPlanLimitsError
from plangate.domains.usage.exceptions import LimitExceededError


async def limit_exceeded_exception_handler(
    request: Request, exc: LimitExceededError
) -> JSONResponse:
    """Exception handler for LimitExceededError.

    Args:
    ----
        request (Request): The incoming request that triggered the exception.
        exc (LimitExceededError): The exception object that was raised.

    Returns:
    -------
        JSONResponse: A 402 Payment Required response with the limit breakdown.

    """
    logger.with_context(metric=exc.metric, path=request.url.path).info(
        f"Plan limit exceeded: {exc}"
    )
    return JSONResponse(status_code=402, content=exc.to_detail())


async def not_found_exception_handler(request: Request, exc: NotFoundException) -> JSONResponse:
    """Exception handler for NotFoundException.

    Returns:
    -------
        JSONResponse: A 404 Not Found status response that details the error message.

    """
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def invalid_state_exception_handler(request: Request, exc: InvalidStateError) -> JSONResponse:
    """Exception handler for InvalidStateError.

    Returns:
    -------
        JSONResponse: A 400 Bad Request status response that details the error message.

    """
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def invalid_plan_limits_exception_handler(
    request: Request, exc: InvalidPlanLimitsError
) -> JSONResponse:
    """Exception handler for InvalidPlanLimitsError (422 with the offending key)."""
    return JSONResponse(status_code=422, content={"detail": str(exc), "key": exc.key})


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers; the more specific exception types first."""
    app.exception_handler(LimitExceededError)(limit_exceeded_exception_handler)
    app.exception_handler(InvalidPlanLimitsError)(invalid_plan_limits_exception_handler)
    app.exception_handler(NotFoundException)(not_found_exception_handler)
    app.exception_handler(InvalidStateError)(invalid_state_exception_handler)
