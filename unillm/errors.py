"""Error hierarchy shared by all backends."""


class LLMError(Exception):
    """Base error for every provider operation."""


class AuthError(LLMError):
    """Missing or empty credential. Raised before any network call."""


class InvalidRequestError(LLMError):
    """Provider configuration or request could not be assembled."""


class TransportError(LLMError):
    """The HTTP exchange with the vendor failed."""


class HttpError(TransportError):
    """Network failure or timeout while talking to the vendor."""


class ResponseError(TransportError):
    """Vendor answered with a non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}" if detail else f"HTTP {status_code}")


class ResponseFormatError(LLMError):
    """Vendor response body does not match the expected shape."""

    def __init__(self, message: str, raw_response: str = ""):
        self.raw_response = raw_response
        super().__init__(message)


class UnsupportedError(LLMError):
    """The backend does not implement the requested capability."""
