"""Error taxonomy for the macro ledger engine."""

from uuid import UUID


class MacroLedgerError(Exception):
    """Base error carrying a message, an HTTP status and extra details."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(MacroLedgerError):
    """Malformed or out-of-range input (body metrics, macro values)."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class IncompleteSubmissionError(MacroLedgerError):
    """A meal has neither an analysis result nor manual macros."""

    status_code = 422

    def __init__(self) -> None:
        super().__init__(
            "Meal needs either an analyzable description or manual macros"
        )


class NotFoundError(MacroLedgerError):
    """A referenced record does not exist or is not owned by the caller."""

    status_code = 404

    def __init__(self, resource: str, identifier: UUID | str) -> None:
        super().__init__(
            f"{resource} '{identifier}' not found",
            {"resource": resource, "id": str(identifier)},
        )


class UpstreamUnavailableError(MacroLedgerError):
    """The analysis collaborator timed out, failed or sent a bad payload."""

    status_code = 503


class StorageError(MacroLedgerError):
    """The persistence collaborator failed."""

    status_code = 500

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message, {"operation": operation} if operation else None)
