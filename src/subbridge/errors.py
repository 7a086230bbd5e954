"""Errors raised while sending a file to the translation service."""


class TransferError(Exception):
    """A translation request failed. The message is meant for the user."""


class ConnectionFailed(TransferError):
    """The translation service could not be reached."""

    def __init__(self, api_url: str):
        super().__init__(
            f"Cannot reach translation service at {api_url}. Please verify:\n"
            "1. The service is running\n"
            "2. The URL is correct\n"
            "3. Cross-origin requests (CORS) or your proxy allow this client"
        )
        self.api_url = api_url


class AuthError(TransferError):
    """The service rejected our credentials."""


class NotFoundError(TransferError):
    """The translate endpoint does not exist at the configured URL."""


class ServerError(TransferError):
    """The service answered with a failure status or an error payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UnexpectedError(TransferError):
    """Any failure that does not fit the other categories."""


class TransferCancelled(TransferError):
    """The request was abandoned because the session was reset."""
