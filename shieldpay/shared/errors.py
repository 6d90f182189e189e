"""Error taxonomy shared by the risk engine and the case lifecycle."""


class ShieldPayError(Exception):
    """Base class for errors surfaced to callers with a stable kind."""

    kind = "shieldpay_error"

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(ShieldPayError):
    """Missing or malformed fields on a command."""

    kind = "validation_error"


class NotFound(ShieldPayError):
    """An operation referenced an id that does not exist."""

    kind = "not_found"


class AnalysisFailure(ShieldPayError):
    """A detector faulted while scoring one transaction."""

    kind = "analysis_failure"

    def __init__(self, message: str, transaction_id: int | None = None, **context) -> None:
        super().__init__(message, transaction_id=transaction_id, **context)
        self.transaction_id = transaction_id
