from .client import AuthenticatedClient, UnauthenticatedClient, connect
from .errors import ApiError, DecodeError, NetworkError, PastyClientError, RequestError, UrlParseError
from .models import ApplicationInformation, CreatedPaste, Metadata, Paste, PfEncryption

__all__ = [
    "UnauthenticatedClient",
    "AuthenticatedClient",
    "connect",
    "PastyClientError",
    "RequestError",
    "NetworkError",
    "ApiError",
    "DecodeError",
    "UrlParseError",
    "ApplicationInformation",
    "CreatedPaste",
    "Metadata",
    "Paste",
    "PfEncryption",
]
