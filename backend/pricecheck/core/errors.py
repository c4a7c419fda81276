from typing import Optional


class PriceCheckError(Exception):
    """Base class for errors raised by the price check service."""


class InvalidQueryError(PriceCheckError):
    """The search query was missing or blank after trimming."""

    def __init__(self, message: str = "Missing query parameter"):
        super().__init__(message)
        self.message = message


class UpstreamError(PriceCheckError):
    """
    An outbound call to a product source failed.

    `status_code` is None for transport failures (connect errors, timeouts)
    and for error payloads returned with a 2xx status.
    """

    def __init__(
        self,
        source: str,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        text = f"{source} {message}"
        if status_code is not None:
            text = f"{source} HTTP {status_code}: {message}"
        if body:
            text = f"{text} - {body}"
        super().__init__(text)
        self.source = source
        self.message = message
        self.status_code = status_code
        self.body = body
