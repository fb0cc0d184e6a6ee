"""Market data fetching and background price polling."""

from omnidesk.market.binance import (
    BinanceTickerClient,
    parse_tickers,
    to_display_symbol,
    to_exchange_symbol,
)
from omnidesk.market.poller import PRICES_UPDATE_EVENT, PriceCache, PricePoller

__all__ = [
    "BinanceTickerClient",
    "PRICES_UPDATE_EVENT",
    "PriceCache",
    "PricePoller",
    "parse_tickers",
    "to_display_symbol",
    "to_exchange_symbol",
]
