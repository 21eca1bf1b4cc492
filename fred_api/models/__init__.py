"""Request models."""

from fred_api.models.request import Lookup, RequestSpec, build_request

__all__ = ["Lookup", "RequestSpec", "build_request"]
