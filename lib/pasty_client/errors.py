from __future__ import annotations


class PastyClientError(Exception):
    """Base client error."""


class RequestError(PastyClientError):
    """Transport/HTTP layer error."""


class NetworkError(RequestError):
    """Connection, DNS, TLS or timeout failure."""


class ApiError(RequestError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class DecodeError(RequestError):
    """Response body is not JSON or does not match the expected shape."""


class UrlParseError(PastyClientError):
    def __init__(self, message: str):
        super().__init__(f"parsing url: {message}")
