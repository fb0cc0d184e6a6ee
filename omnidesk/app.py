"""Application facade for the OmniTrade desktop companion.

Wires the local store, price poller and daemon supervisor together and
exposes the operations the UI invokes.
"""

import logging
import math
from typing import Callable, Optional

from omnidesk.config import Settings, load_settings
from omnidesk.daemon import DaemonSupervisor
from omnidesk.db.store import LocalStore
from omnidesk.errors import InvalidRequestError
from omnidesk.market import PRICES_UPDATE_EVENT, BinanceTickerClient, PriceCache, PricePoller
from omnidesk.models import (
    Alert,
    AppConfig,
    DaemonStatus,
    PaperWallet,
    PortfolioData,
    PriceSnapshot,
    RecurringSchedule,
)

logger = logging.getLogger(__name__)


def _require_text(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidRequestError(f"{field} must not be empty")
    return value


class Companion:
    """Entry point for every companion operation.

    Use as a context manager to run the background price poller for the
    lifetime of the block.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        market_client: Optional[BinanceTickerClient] = None,
    ):
        """Initialize the companion.

        Args:
            settings: Runtime settings. Loaded from the data directory if omitted.
            market_client: Market-data client. Built from settings if omitted.
        """
        self.settings = settings or load_settings()
        self.store = LocalStore(self.settings.data_dir)
        self.market = market_client or BinanceTickerClient(
            base_url=self.settings.market.base_url,
            timeout=self.settings.market.timeout,
        )
        self.prices = PriceCache()
        self.poller = PricePoller(
            fetcher=self.market.get_prices,
            symbols=self.settings.market.symbols,
            cache=self.prices,
            interval=self.settings.market.poll_interval,
        )
        self.supervisor = DaemonSupervisor(
            pid_path=self.settings.pid_path,
            log_path=self.settings.log_path,
            executable=self.settings.daemon.executable,
            timeout=self.settings.daemon.timeout,
        )

    def start(self) -> None:
        """Start background price polling."""
        self.poller.start()

    def shutdown(self) -> None:
        """Stop polling and release network resources."""
        self.poller.stop(timeout=self.settings.market.timeout)
        self.market.close()

    def __enter__(self) -> "Companion":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def subscribe(
        self, event: str, callback: Callable[[str, list[PriceSnapshot]], None]
    ) -> Callable[[], None]:
        """Subscribe to a companion event. Only "prices-update" exists."""
        if event != PRICES_UPDATE_EVENT:
            raise InvalidRequestError(f"Unknown event: {event}")
        return self.poller.subscribe(callback)

    # ==================== Alerts ====================

    def get_alerts(self) -> list[Alert]:
        return self.store.get_alerts()

    def add_alert(self, symbol: str, condition: str, price: float) -> Alert:
        """Create a price alert on Binance."""
        symbol = _require_text(symbol, "symbol")
        condition = _require_text(condition, "condition")
        if not math.isfinite(price) or price <= 0:
            raise InvalidRequestError(f"price must be a positive number, got {price}")
        return self.store.add_alert(symbol, condition, price)

    def remove_alert(self, alert_id: str) -> None:
        self.store.remove_alert(alert_id)

    def check_alerts(self, snapshots: Optional[list[PriceSnapshot]] = None) -> list[Alert]:
        """Trigger alerts against the given prices, or the latest polled ones."""
        if snapshots is None:
            snapshots = self.get_cached_prices()
        return self.store.check_alerts(snapshots)

    # ==================== DCA ====================

    def get_schedules(self) -> list[RecurringSchedule]:
        return self.store.get_schedules()

    def toggle_schedule(self, schedule_id: str, enabled: bool) -> None:
        self.store.toggle_schedule(schedule_id, enabled)

    # ==================== Config ====================

    def get_config(self) -> AppConfig:
        """Get the config with secrets redacted."""
        return self.store.get_config()

    def save_exchange(
        self,
        name: str,
        api_key: str,
        secret: str,
        testnet: bool,
        password: Optional[str] = None,
    ) -> None:
        name = _require_text(name, "exchange name")
        api_key = _require_text(api_key, "api key")
        secret = _require_text(secret, "secret")
        password = (password or "").strip() or None
        self.store.save_exchange(name, api_key, secret, testnet, password)

    # ==================== Daemon ====================

    def get_daemon_status(self) -> DaemonStatus:
        return self.supervisor.status()

    def start_daemon(self) -> None:
        self.supervisor.start()

    def stop_daemon(self) -> None:
        self.supervisor.stop()

    def get_daemon_log(self, lines: int = 50) -> list[str]:
        return self.supervisor.tail_log(lines)

    # ==================== Portfolio ====================

    def get_paper_wallet(self) -> PaperWallet:
        return self.store.get_paper_wallet()

    def get_live_portfolio(self, exchange: str) -> PortfolioData:
        """Live exchange balances are not fetched yet; always empty."""
        _require_text(exchange, "exchange")
        return PortfolioData()

    # ==================== Prices ====================

    def get_prices(self, symbols: list[str]) -> list[PriceSnapshot]:
        """Fetch prices on demand, bypassing the poller's cache."""
        if not symbols:
            raise InvalidRequestError("at least one symbol is required")
        return self.market.get_prices(symbols)

    def get_cached_prices(self) -> list[PriceSnapshot]:
        """Get the last successfully polled prices."""
        return list(self.prices.get())
