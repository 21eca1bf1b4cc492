"""Exceptions raised by the FRED client, cache and field extractor."""

from __future__ import annotations


class FredApiError(Exception):
    """Base exception for all fred_api errors."""

    pass


class ConfigurationError(FredApiError):
    """Raised when required settings are missing."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when no API key was supplied and FRED_API_KEY is unset."""

    def __init__(self, variable: str = "FRED_API_KEY") -> None:
        self.variable = variable
        super().__init__(
            f"{variable} not set. Get one at: "
            "https://fred.stlouisfed.org/docs/api/api_key.html"
        )


class CacheLocationError(ConfigurationError):
    """Raised when no cache directory was supplied and FRED_CACHE is unset."""

    def __init__(self, variable: str = "FRED_CACHE") -> None:
        self.variable = variable
        super().__init__(f"{variable} not set and no cache directory supplied.")


class InvalidUriError(FredApiError):
    """Raised when a request fragment does not produce a valid URI."""

    def __init__(self, fragment: str, reason: str) -> None:
        self.fragment = fragment
        self.reason = reason
        super().__init__(reason)


class NetworkError(FredApiError):
    """Raised when the HTTP exchange fails before a response is received."""

    def __init__(self, fragment: str, cause: Exception) -> None:
        self.fragment = fragment
        self.cause = cause
        super().__init__(f"Request failed with error: {cause}.")


class ProviderError(FredApiError):
    """Raised when FRED answers with a non-200 status.

    The message is taken from the ``<error message="..."/>`` element of the
    response body, or is ``"Unknown error"`` when the body has none.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"FRED API error: '{message}'")


class CacheMissError(FredApiError):
    """Raised by a cache-only lookup when the key is absent."""

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(f"Cache only request (fragment '{fragment}') failed")


class StorageError(FredApiError):
    """Raised when the underlying store fails."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(str(cause))


class CacheInconsistencyError(FredApiError):
    """Raised when a response was written to the cache but cannot be read back.

    This indicates the store dropped an acknowledged write and should not be
    retried.
    """

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(f"Just inserted but not found: '{fragment}'")


class FieldExtractionError(FredApiError):
    """Base exception for errors raised while iterating a FieldIter."""

    pass


class MissingAttributeError(FieldExtractionError):
    def __init__(self, field: str, tag: str) -> None:
        self.field = field
        self.tag = tag
        super().__init__(f"Missing attribute '{field}' in tag '{tag}'")


class EmptyAttributeError(FieldExtractionError):
    def __init__(self, field: str, tag: str) -> None:
        self.field = field
        self.tag = tag
        super().__init__(f"Empty attribute '{field}' in tag '{tag}'")


class FieldDecodeError(FieldExtractionError):
    def __init__(self, field: str, cause: Exception) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"XML decoding error for attribute '{field}': {cause}")


class MalformedMarkupError(FieldExtractionError):
    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"XML parsing error: {cause}")
