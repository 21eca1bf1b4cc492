"""Request identity and lookup policy for FRED requests."""

import os
import re
from dataclasses import dataclass, field
from enum import Enum

import httpx

from fred_api.config import API_KEY_VAR, BASE_URL
from fred_api.exceptions import InvalidUriError, MissingCredentialError


# RFC 3986 unreserved, reserved and percent characters
_URI_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")


@dataclass(frozen=True)
class RequestSpec:
    """
    The middle part of a FRED request URI.

    The base URI is removed from the left and the API key from the right:

        https://api.stlouisfed.org/fred/series/observations?series_id=GNPCA&api_key=abcd
                                        ------------------------------------

    The fragment keeps its trailing ``?`` or ``&`` so the key can be appended.
    Only the fragment identifies the request; the API key is never part of the
    cache key or of the rendered spec.
    """

    fragment: str
    api_key: str = field(repr=False)

    @classmethod
    def new(cls, fragment: str, api_key: str | None = None) -> "RequestSpec":
        """
        Create a request spec.

        Args:
            fragment: Path and query between the base URI and ``api_key=``
            api_key: FRED API key; read from FRED_API_KEY when None

        Raises:
            MissingCredentialError: If no key is given and FRED_API_KEY is unset
        """
        if api_key is None:
            api_key = os.getenv(API_KEY_VAR)
            if api_key is None:
                raise MissingCredentialError(API_KEY_VAR)
        return cls(fragment=fragment, api_key=api_key)

    def uri(self, base: str = BASE_URL) -> httpx.URL:
        """Build the full request URI, validating the fragment."""
        raw = f"{base}/{self.fragment}api_key={self.api_key}"
        if _URI_CHARS.fullmatch(raw) is None:
            raise InvalidUriError(self.fragment, "invalid uri character")
        try:
            return httpx.URL(raw)
        except httpx.InvalidURL as e:
            raise InvalidUriError(self.fragment, str(e)) from e

    def cache_key(self) -> bytes:
        """Key under which the response is cached."""
        return self.fragment.encode("utf-8")

    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def __str__(self) -> str:
        return self.fragment

    def __repr__(self) -> str:
        return (
            f"RequestSpec(fragment={self.fragment!r}, "
            f"api_key='({len(self.api_key)} characters)')"
        )


def build_request(fragment: str, api_key: str | None = None) -> RequestSpec:
    """
    Build a request from the middle part of a FRED URI.

    See the FRED API documentation for the available requests, e.g.
    ``build_request("series/observations?series_id=GNPCA&")``.
    """
    return RequestSpec.new(fragment, api_key)


class Lookup(Enum):
    """Where a request is answered from. Successful FRED responses are always cached."""

    FRED_ON_CACHE_MISS = "fred_on_cache_miss"
    FRED_ONLY = "fred_only"
    CACHE_ONLY = "cache_only"

    @classmethod
    def from_str(cls, value: str) -> "Lookup":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Could not parse '{value}'") from None
