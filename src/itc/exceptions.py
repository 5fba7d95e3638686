"""Custom exceptions for the itc application."""

from itc.models import ServiceErrorDetail


SERVICE_ERROR_PREFIX = "iTunes Connect Service Error: "


class ITCError(Exception):
    """Base exception for all itc errors."""

    def __init__(self, message: str = "An error occurred with iTunes Connect") -> None:
        self.message = message
        super().__init__(self.message)


class ConfigError(ITCError):
    """Raised when configuration can't be loaded or credentials are missing."""

    def __init__(
        self, message: str = "Missing Apple ID credentials. Pass --appleID/--appleIDPassword or set ITC_APPLEID/ITC_APPLEIDPASSWORD."
    ) -> None:
        super().__init__(message)


class ConfigFetchError(ITCError):
    """Raised when the auth service key can't be fetched."""

    def __init__(self, message: str = "Failed to fetch iTunes Connect service configuration") -> None:
        super().__init__(message)


class SignInError(ITCError):
    """Raised when Apple ID sign-in doesn't produce session cookies."""

    def __init__(self, message: str = "Sign-in failed. Check your Apple ID and password.") -> None:
        super().__init__(message)


class SessionError(ITCError):
    """Raised when the iTunes Connect session can't be established."""

    def __init__(self, message: str = "Failed to establish iTunes Connect session") -> None:
        super().__init__(message)


class NotAuthenticatedError(ITCError):
    """Raised when a request is attempted before authentication completed."""

    def __init__(self, message: str = "Client is not authenticated. Sign in before making requests.") -> None:
        super().__init__(message)


class TransportError(ITCError):
    """Raised when a request fails at the network level."""

    def __init__(self, message: str = "Network error while talking to iTunes Connect") -> None:
        super().__init__(message)


class ServiceError(ITCError):
    """Raised for structured serviceErrors returned by iTunes Connect."""

    def __init__(self, errors: list[ServiceErrorDetail], status_code: int | None = None) -> None:
        self.errors = errors
        self.status_code = status_code
        messages = "; ".join(f"{e.message} ({e.code})" for e in errors)
        super().__init__(f"{SERVICE_ERROR_PREFIX}{messages}")


class UnexpectedStatusError(ITCError):
    """Raised when a non-200 response has no service error payload."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Error ({status_code}): {reason}")
