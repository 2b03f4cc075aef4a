"""
Domain Exceptions

Every failure the boundary layer can report to a user is one of these.
They are raised deep in the stores and engine, and recovered only in
the orchestrator, which turns them into a notification.
"""


class TaxVietError(Exception):
    """Base exception for all domain failures."""

    code = "error"


class DuplicateAccountError(TaxVietError):
    """An account with the same normalized identifier already exists."""

    code = "duplicate_account"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Account already registered: {identifier}")


class AccountNotFoundError(TaxVietError):
    """No account is registered under this identifier."""

    code = "account_not_found"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Account not found: {identifier}")


class InvalidCredentialsError(TaxVietError):
    """The supplied secret does not match the account."""

    code = "invalid_credentials"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Invalid credentials for: {identifier}")


class InvalidInputError(TaxVietError):
    """Input rejected before any computation or mutation happened."""

    code = "invalid_input"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class RecordNotFoundError(TaxVietError):
    """
    No record with this id in the user's collection.

    Only raised by strict lookups. Delete and toggle treat a missing
    record as a no-op.
    """

    code = "record_not_found"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class NotAuthenticatedError(TaxVietError):
    """A scoped operation was called while no session is active."""

    code = "not_authenticated"

    def __init__(self):
        super().__init__("No active session")
