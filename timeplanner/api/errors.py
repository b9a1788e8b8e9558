import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import PlannerError, ValidationFailed

logger = logging.getLogger(__name__)


def _field_path(loc) -> str:
    # drop the "body"/"query" prefix FastAPI adds
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def planner_error_handler(request: Request, exc: PlannerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    err = ValidationFailed(
        "One or more validation errors occurred.",
        errors=[{"field": _field_path(e.get("loc", ())), "message": e.get("msg", "")} for e in exc.errors()],
    )
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error has occurred. Please try again later.",
            "errors": [],
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlannerError, planner_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
