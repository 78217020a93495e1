"""CoinMarketCap API client for cryptocurrency quotes.

Every call is a single blocking request with no retries. Provider-side
failures (bad status, non-zero ``error_code``, undecodable payloads) raise
UpstreamError; network failures raise TransportError.
"""

import logging
from collections.abc import Iterable
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from coinfolio.config import Settings, get_settings
from coinfolio.exceptions import TransportError, UpstreamError
from coinfolio.schemas.coinmarketcap import QUOTE_CURRENCY, CmcAsset, CmcEnvelope
from coinfolio.schemas.crypto import QuoteSnapshot

logger = logging.getLogger(__name__)


class QuoteProviderClient:
    """Client for the CoinMarketCap Pro API.

    Usage:
        with QuoteProviderClient(api_key) as client:
            top = client.fetch_listing(limit=10)
            quotes = client.fetch_by_ids({1, 1027})
    """

    LISTINGS_PATH = "/cryptocurrency/listings/latest"
    QUOTES_PATH = "/cryptocurrency/quotes/latest"
    DEFAULT_BASE_URL = "https://pro-api.coinmarketcap.com/v1"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: CoinMarketCap API key; calls fail until one is set.
            base_url: API root, without a trailing slash.
            transport: Optional httpx transport (used to stub the API in tests).
        """
        self.api_key = api_key
        if not api_key:
            logger.warning("COINMARKETCAP_API_KEY is not configured")

        headers = {"Accept": "application/json"}
        if api_key:
            headers["X-CMC_PRO_API_KEY"] = api_key
        self._client = httpx.Client(base_url=base_url, headers=headers, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "QuoteProviderClient":
        settings = settings or get_settings()
        return cls(settings.coinmarketcap_api_key, settings.coinmarketcap_base_url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "QuoteProviderClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_listing(self, limit: int = 100, start: int = 1) -> list[QuoteSnapshot]:
        """Fetch assets ordered by market rank, starting at rank ``start``."""
        params = {"start": start, "limit": limit, "convert": QUOTE_CURRENCY}
        data = self._get(self.LISTINGS_PATH, params)
        snapshots = self._decode_assets(data)
        logger.debug(f"Fetched {len(snapshots)} listing entries (start={start}, limit={limit})")
        return snapshots

    def fetch_by_ids(self, ids: Iterable[int]) -> list[QuoteSnapshot]:
        """Fetch quotes for the given asset ids in one request.

        Ids the provider does not know are simply absent from the result.
        """
        unique_ids = sorted(set(ids))
        if not unique_ids:
            return []

        params = {"id": ",".join(str(i) for i in unique_ids), "convert": QUOTE_CURRENCY}
        data = self._get(self.QUOTES_PATH, params)
        return self._decode_assets(data)

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        """Issue a GET and return the envelope's ``data`` member."""
        if not self.api_key:
            raise UpstreamError("CoinMarketCap API key not configured")

        try:
            response = self._client.get(path, params=params)
        except httpx.TransportError as e:
            logger.error(f"CoinMarketCap request to {path} failed: {e}")
            raise TransportError(f"CoinMarketCap is unreachable: {e}") from e

        envelope = self._parse_envelope(response)

        if response.is_error:
            message = response.reason_phrase
            error_code = None
            if envelope is not None:
                message = envelope.status.error_message or message
                error_code = envelope.status.error_code
            logger.error(f"CoinMarketCap API error {response.status_code} on {path}: {message}")
            raise UpstreamError(
                f"CoinMarketCap API error: {response.status_code} {message}",
                status_code=response.status_code,
                error_code=error_code,
            )

        if envelope is None:
            logger.error(f"CoinMarketCap returned an unreadable body on {path}")
            raise UpstreamError(
                "CoinMarketCap returned an unreadable response",
                status_code=response.status_code,
            )

        if envelope.status.error_code != 0:
            logger.error(
                f"CoinMarketCap error_code {envelope.status.error_code} on {path}: "
                f"{envelope.status.error_message}"
            )
            raise UpstreamError(
                f"CoinMarketCap API error: {envelope.status.error_message}",
                status_code=response.status_code,
                error_code=envelope.status.error_code,
            )

        return envelope.data

    @staticmethod
    def _parse_envelope(response: httpx.Response) -> CmcEnvelope | None:
        try:
            return CmcEnvelope.model_validate(response.json())
        except (ValueError, PydanticValidationError):
            return None

    @staticmethod
    def _decode_assets(data: Any) -> list[QuoteSnapshot]:
        """Decode the ``data`` member into snapshots.

        Listings return a list; quotes-by-id return an object keyed by id.
        """
        if isinstance(data, dict):
            items = list(data.values())
        elif isinstance(data, list):
            items = data
        else:
            raise UpstreamError("CoinMarketCap response has no asset data")

        snapshots = []
        for item in items:
            try:
                snapshots.append(CmcAsset.model_validate(item).to_snapshot())
            except PydanticValidationError as e:
                logger.error(f"Malformed CoinMarketCap asset entry: {e}")
                raise UpstreamError("CoinMarketCap returned a malformed asset entry") from e
        return snapshots
