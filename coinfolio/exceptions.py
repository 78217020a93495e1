"""Domain exceptions raised by the account and portfolio services.

Each exception carries a short machine-readable ``code``; the HTTP layer maps
the class to a status code and never needs to inspect the message.
"""


class CoinfolioError(Exception):
    """Base exception for service-level failures."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CoinfolioError):
    """Input has the wrong shape or length."""

    code = "validation_error"


class ConflictError(CoinfolioError):
    """A uniqueness rule would be violated."""

    code = "conflict"


class AuthError(CoinfolioError):
    """Bad credentials or an unusable token.

    The message is kept identical across causes so callers cannot tell an
    unknown email from a wrong password, or a forged token from an expired one.
    """

    code = "unauthorized"


class NotFoundError(CoinfolioError):
    """The targeted resource does not exist."""

    code = "not_found"


class UpstreamError(CoinfolioError):
    """The quote provider answered but reported a failure."""

    code = "upstream_error"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: int | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class TransportError(CoinfolioError):
    """The quote provider could not be reached."""

    code = "upstream_unreachable"


class AccountDeletionError(CoinfolioError):
    """Account deletion failed; ``stage`` names the step that broke."""

    code = "account_deletion_failed"

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage
