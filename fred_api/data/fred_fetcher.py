"""FRED API requests with write-through caching."""

import asyncio
import logging
import ssl

import httpx
import pandas as pd

from fred_api.config import BASE_URL, Settings, fred_cache
from fred_api.data.cache import ResponseCache
from fred_api.data.fields import FieldIter
from fred_api.data.observations import observations_frame
from fred_api.exceptions import (
    CacheInconsistencyError,
    CacheMissError,
    ConfigurationError,
    FieldExtractionError,
    FredApiError,
    NetworkError,
    ProviderError,
)
from fred_api.models import Lookup, RequestSpec


logger = logging.getLogger(__name__)


def tls13_context() -> ssl.SSLContext:
    """SSL context restricted to TLS 1.3, without a client certificate."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_3
    context.maximum_version = ssl.TLSVersion.TLSv1_3
    return context


def _error_message(body: bytes) -> str:
    """Message of the ``<error message="..."/>`` element of a FRED error body."""
    try:
        row = next(FieldIter("error", ["message"], body), None)
    except FieldExtractionError:
        return "Unknown error"
    return row[0] if row else "Unknown error"


class FredFetcher:
    """Fetches responses from the FRED API and writes them through to the cache."""

    def __init__(
        self,
        cache: ResponseCache | None = None,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str = BASE_URL,
    ) -> None:
        self.settings = settings or Settings()
        self.cache = (
            cache if cache is not None else ResponseCache(fred_cache(self.settings.cache_dir))
        )
        self.base_url = base_url
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(verify=tls13_context(), timeout=30.0)
        return self._client

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FredFetcher":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def fred_request(self, spec: RequestSpec) -> bytes:
        """
        Request from FRED, bypassing the cache for reads.

        A 200 response is stored with insert_if_absent and then read back, so
        the returned bytes are exactly the bytes now held by the cache.

        Raises:
            InvalidUriError: If the spec does not form a valid URI
            NetworkError: If no response was received
            ProviderError: If FRED answered with a non-200 status
            CacheInconsistencyError: If the stored response cannot be read back
        """
        uri = spec.uri(self.base_url)
        logger.info(f"Requesting {spec} from FRED...")

        try:
            response = await self.client.get(uri)
        except httpx.HTTPError as e:
            raise NetworkError(spec.fragment, e) from e

        if response.status_code != httpx.codes.OK:
            message = _error_message(response.content)
            logger.warning(f"  FRED returned {response.status_code} for {spec}: {message}")
            raise ProviderError(message, response.status_code)

        key = spec.cache_key()
        self.cache.insert_if_absent(key, response.content)
        stored = self.cache.get(key)
        if stored is None:
            raise CacheInconsistencyError(spec.fragment)

        logger.info(f"  Cached {len(stored)} bytes for {spec}")
        return stored

    async def fetch_series(
        self, series_id: str, lookup: Lookup = Lookup.FRED_ON_CACHE_MISS
    ) -> pd.DataFrame:
        """
        Fetch all observations of a series.

        Args:
            series_id: FRED series ID
            lookup: Where the response may come from

        Returns:
            DataFrame with date index and value column
        """
        spec = RequestSpec.new(
            f"series/observations?series_id={series_id}&",
            self.settings.fred_api_key or None,
        )
        data = await send_request(spec, lookup, self.cache, fetcher=self)
        return observations_frame(data)


def cache_request(spec: RequestSpec, cache: ResponseCache) -> bytes | None:
    """Look a request up in the cache only."""
    return cache.get(spec.cache_key())


async def send_request(
    spec: RequestSpec,
    lookup: Lookup,
    cache: ResponseCache,
    fetcher: FredFetcher | None = None,
) -> bytes:
    """
    Answer a request from FRED or the cache, as selected by ``lookup``.

    A given ``fetcher`` must write to the same ``cache``. Without one, a
    fetcher is created for this call and closed afterwards.

    Raises:
        CacheMissError: If a cache-only request is not cached
        StorageError: If the cache fails; the network is not tried
    """
    if lookup is Lookup.CACHE_ONLY:
        data = cache_request(spec, cache)
        if data is None:
            raise CacheMissError(spec.fragment)
        return data

    if lookup is Lookup.FRED_ON_CACHE_MISS:
        data = cache_request(spec, cache)
        if data is not None:
            logger.debug(f"Cache hit for {spec}")
            return data
    elif lookup is not Lookup.FRED_ONLY:
        raise ValueError(f"Unknown lookup: {lookup!r}")

    if fetcher is not None:
        return await fetcher.fred_request(spec)
    async with FredFetcher(cache) as owned_fetcher:
        return await owned_fetcher.fred_request(spec)


async def _run(args, cache: ResponseCache) -> None:
    lookup = Lookup.from_str(args.lookup)
    settings = Settings(fred_api_key=args.api_key) if args.api_key else Settings()

    async with FredFetcher(cache, settings=settings) as fetcher:
        if args.series:
            df = await fetcher.fetch_series(args.series, lookup)
            print(df.to_string())
            return

        spec = RequestSpec.new(args.fragment, args.api_key)
        data = await send_request(spec, lookup, cache, fetcher=fetcher)

    if args.field:
        for row in FieldIter(args.tag, args.field, data):
            print("\t".join(row))
    else:
        print(data.decode("utf-8", errors="replace"))


def main() -> None:
    """CLI entry point for requesting FRED data."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    # httpx logs request URLs, which carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)

    parser = argparse.ArgumentParser(description="Request FRED data through the cache")
    parser.add_argument(
        "fragment",
        nargs="?",
        help="Request between the base URI and api_key, e.g. 'series?series_id=GNPCA&'",
    )
    parser.add_argument(
        "--lookup",
        choices=[lookup.value for lookup in Lookup],
        default=Lookup.FRED_ON_CACHE_MISS.value,
        help="Where the response may come from",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        help="FRED API key (default: FRED_API_KEY)",
    )
    parser.add_argument(
        "--cache",
        type=str,
        help="Cache directory (default: FRED_CACHE)",
    )
    parser.add_argument(
        "--tag",
        type=str,
        default="observation",
        help="Element to extract fields from",
    )
    parser.add_argument(
        "--field",
        action="append",
        help="Attribute to print; repeat for several",
    )
    parser.add_argument(
        "--series",
        type=str,
        help="Fetch observations for a series ID",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show cache status and exit",
    )
    args = parser.parse_args()

    try:
        cache = ResponseCache(fred_cache(args.cache or Settings().cache_dir))

        if args.status:
            status = cache.get_cache_status()
            print("\nCache Status:")
            print("-" * 70)
            print(f"  Database:  {status['db_path']}")
            print(f"  Entries:   {status['entry_count']}")
            print(f"  Size:      {status['total_bytes']} bytes")
            print(f"  Last:      {status['last_fetched'] or 'N/A'}")
            for key in cache.keys():
                print(f"    {key.decode('utf-8', errors='replace')}")
            return

        if not args.fragment and not args.series:
            parser.error("a fragment or --series is required")

        asyncio.run(_run(args, cache))

    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except FredApiError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
