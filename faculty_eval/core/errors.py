import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from faculty_eval.core.config import settings

logger = logging.getLogger(__name__)

# SQLSTATE -> (http status, message)
PG_ERROR_MAP: dict[str, tuple[int, str]] = {
    "23505": (status.HTTP_409_CONFLICT, "Resource already exists"),
    "23503": (status.HTTP_400_BAD_REQUEST, "Invalid reference to a related resource"),
    "23502": (status.HTTP_400_BAD_REQUEST, "A required field is missing"),
    "23514": (status.HTTP_400_BAD_REQUEST, "A field value violates a constraint"),
    "42P01": (status.HTTP_501_NOT_IMPLEMENTED, "A required table does not exist in this database"),
}

# SQLite has no SQLSTATE; match on the driver message instead
SQLITE_MESSAGE_MAP: list[tuple[str, str]] = [
    ("UNIQUE constraint failed", "23505"),
    ("FOREIGN KEY constraint failed", "23503"),
    ("NOT NULL constraint failed", "23502"),
    ("CHECK constraint failed", "23514"),
    ("no such table", "42P01"),
]


def sqlstate_of(exc: DBAPIError) -> str | None:
    orig = getattr(exc, "orig", None)
    # psycopg 3 exposes .sqlstate, psycopg2 exposes .pgcode
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code
    text = str(orig)
    for needle, mapped in SQLITE_MESSAGE_MAP:
        if needle in text:
            return mapped
    return None


def classify_db_error(exc: DBAPIError) -> tuple[int, str]:
    code = sqlstate_of(exc)
    if code in PG_ERROR_MAP:
        return PG_ERROR_MAP[code]
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"


def error_body(message: str, errors: list | None = None, **extra) -> dict:
    body = {"status": "error", "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if isinstance(detail, dict):
        body = error_body(
            detail.get("message", "Request failed"),
            detail.get("errors"),
            **{k: v for k, v in detail.items() if k not in ("message", "errors")},
        )
    else:
        body = error_body(str(detail))
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for e in exc.errors():
        loc = [str(p) for p in e.get("loc", ()) if p not in ("body", "query", "path", "header")]
        errors.append({
            "field": ".".join(loc) or "request",
            "code": e.get("type", "invalid"),
            "message": e.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", errors),
    )


async def db_exception_handler(request: Request, exc: DBAPIError):
    status_code, message = classify_db_error(exc)
    if status_code >= 500:
        logger.exception("Database error on %s %s", request.method, request.url.path)
    else:
        logger.warning("Database constraint error on %s %s: %s", request.method, request.url.path, exc.orig)

    extra = {}
    if settings.is_development:
        extra["db_error"] = {"code": sqlstate_of(exc), "detail": str(exc.orig)}
    return JSONResponse(status_code=status_code, content=error_body(message, **extra))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    extra = {"error": str(exc)} if settings.is_development else {}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", **extra),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DBAPIError, db_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
