"""Binance 24h ticker client."""

import json
import logging
from typing import Any, Optional

import httpx

from omnidesk.errors import ExternalCallError
from omnidesk.models import PriceSnapshot

logger = logging.getLogger(__name__)

TICKER_ENDPOINT = "/api/v3/ticker/24hr"
QUOTE_ASSET = "USDT"


def to_exchange_symbol(symbol: str) -> str:
    """Convert a display symbol to Binance form ("BTC/USDT" -> "BTCUSDT")."""
    return symbol.replace("/", "")


def to_display_symbol(symbol: str) -> str:
    """Convert a Binance symbol to display form ("BTCUSDT" -> "BTC/USDT").

    Only USDT-quoted pairs are split; anything else is returned unchanged.
    """
    if symbol.endswith(QUOTE_ASSET):
        return f"{symbol[:-len(QUOTE_ASSET)]}/{QUOTE_ASSET}"
    return symbol


def _parse_decimal(value: Any) -> float:
    """Parse a decimal string, defaulting to 0.0 when it is not a number."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def parse_tickers(payload: Any) -> list[PriceSnapshot]:
    """Convert a batched 24h ticker payload into snapshots.

    Raises:
        ExternalCallError: If the payload is not an array of ticker objects.
    """
    if not isinstance(payload, list):
        raise ExternalCallError(
            f"Unexpected ticker payload: expected a list, got {type(payload).__name__}"
        )

    snapshots = []
    for ticker in payload:
        if not isinstance(ticker, dict) or not isinstance(ticker.get("symbol"), str):
            raise ExternalCallError(f"Malformed ticker entry: {ticker!r}")
        snapshots.append(
            PriceSnapshot(
                symbol=to_display_symbol(ticker["symbol"]),
                price=_parse_decimal(ticker.get("lastPrice")),
                change_24h=_parse_decimal(ticker.get("priceChangePercent")),
                volume_24h=_parse_decimal(ticker.get("quoteVolume")),
            )
        )
    return snapshots


class BinanceTickerClient:
    """
    Market-data client for the Binance public ticker API.

    One batched request fetches every requested symbol.
    """

    def __init__(
        self,
        base_url: str = "https://api.binance.com",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def fetch_tickers(self, symbols: list[str]) -> list[PriceSnapshot]:
        """Fetch 24h ticker snapshots for exchange-form symbols.

        Args:
            symbols: Binance symbols (e.g., ["BTCUSDT", "ETHUSDT"]).

        Returns:
            One snapshot per ticker in the response, with display symbols.

        Raises:
            ExternalCallError: On transport failure, non-2xx status or a
                malformed response.
        """
        params = {"symbols": json.dumps(symbols, separators=(",", ":"))}

        try:
            response = self._get_client().get(TICKER_ENDPOINT, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ExternalCallError(
                f"Binance API error {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalCallError(f"Request failed: {e}") from e
        except ValueError as e:
            raise ExternalCallError(f"Invalid JSON from Binance: {e}") from e

        return parse_tickers(payload)

    def get_prices(self, symbols: list[str]) -> list[PriceSnapshot]:
        """Fetch snapshots for display-form symbols (e.g., "BTC/USDT")."""
        return self.fetch_tickers([to_exchange_symbol(s) for s in symbols])

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
