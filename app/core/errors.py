import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Raw Supabase/network error fragments -> message safe to show users.
# Order matters: first match wins.
SAFE_ERROR_MESSAGES: dict[str, str] = {
    "Invalid login credentials": "Invalid email or password",
    "Email not confirmed": "Please verify your email first",
    "User already registered": "An account with this email already exists",
    "Failed to fetch": "Network error. Please check your connection.",
    "JWT": "Session expired. Please login again.",
    "network": "Network error. Please check your connection.",
}

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


def friendly_error_message(error: BaseException | str | None) -> str:
    """
    Map an external-service error to a user-facing message.

    Internal error text is never returned as-is.
    """
    logger.error("Supabase error: %s", error)
    raw = error if isinstance(error, str) else getattr(error, "message", None) or str(error or "")
    for fragment, message in SAFE_ERROR_MESSAGES.items():
        if fragment in raw:
            return message
    return DEFAULT_ERROR_MESSAGE


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException as `{"error": detail}`."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
