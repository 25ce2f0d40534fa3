"""Exception handlers mapping engine errors to JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from macro_ledger.errors import MacroLedgerError, StorageError

_logger = logging.getLogger(__name__)


def error_response(
    message: str, status_code: int, details: dict[str, object] | None = None
) -> JSONResponse:
    """Build the standard error body."""
    body: dict[str, object] = {"message": message, "status_code": status_code}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content={"error": body})


async def macro_ledger_error_handler(
    request: Request, exc: MacroLedgerError
) -> JSONResponse:
    """Return the error's own status and message."""
    if isinstance(exc, StorageError):
        _logger.error(
            "Storage error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
    else:
        _logger.warning(
            "Request failed on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
        )
    return error_response(exc.message, exc.status_code, exc.details)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MacroLedgerError, macro_ledger_error_handler)
