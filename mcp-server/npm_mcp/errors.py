"""Errors raised by the gateway and the endpoint table."""


class GatewayError(Exception):
    """Base class for failures talking to Nginx Proxy Manager."""


class NotAuthenticated(GatewayError):
    """No valid session; call authenticate first."""

    def __init__(self, message: str = "Not authenticated. Please authenticate first."):
        super().__init__(message)


class AuthError(GatewayError):
    """The token endpoint rejected the credentials or could not be reached."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class UpstreamError(GatewayError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, message: str, body=None):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message
        self.body = body

    @property
    def is_auth_failure(self) -> bool:
        return self.status == 401

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_rejected_payload(self) -> bool:
        return self.status in (400, 422)


class NetworkError(GatewayError):
    """No response was received (timeout, DNS failure, connection refused)."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class UnsupportedOperation(ValueError):
    """A resource kind or operation that the endpoint table does not define."""


AUTH_REQUIRED_MESSAGE = "Not authenticated or token expired. Please authenticate first."


def describe_error(exc: Exception) -> str:
    """User-facing text for a gateway failure.

    A missing session and an upstream 401 read the same: both mean the
    caller has to authenticate again.
    """
    if isinstance(exc, NotAuthenticated):
        return AUTH_REQUIRED_MESSAGE
    if isinstance(exc, UpstreamError):
        if exc.is_auth_failure:
            return AUTH_REQUIRED_MESSAGE
        return f"API Error: {exc.status} - {exc.message}"
    if isinstance(exc, NetworkError):
        return f"Unable to reach Nginx Proxy Manager: {exc}"
    return str(exc)
