"""
Ledger error taxonomy.

Services raise these; the API layer turns them into JSON error responses.
"""


class LedgerError(Exception):
    """Base class for every business-rule failure."""

    code = "ledger_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Bad input: non-positive amount, same wallets, missing reason..."""

    code = "validation_error"
    status_code = 422


class InsufficientFundsError(ValidationError):
    code = "insufficient_funds"


class StateConflictError(LedgerError):
    """The day is already opened or closed."""

    code = "state_conflict"
    status_code = 409


class NotFoundError(LedgerError):
    code = "not_found"
    status_code = 404
