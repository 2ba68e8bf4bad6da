"""Shared response helpers for the JSON routes."""
from fastapi.responses import JSONResponse

from dinner.domain.Outcome import Outcome

NOT_FOUND_MARKER = "not found"


def error_response(outcome: Outcome, status_code: int = 400) -> JSONResponse:
    """{"error": msg}; messages saying something was not found become 404."""
    message = outcome.error or "Unknown error"
    if status_code == 400 and NOT_FOUND_MARKER in message.lower():
        status_code = 404
    return JSONResponse(status_code=status_code, content={"error": message})
