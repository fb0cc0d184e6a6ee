"""JSON collection store for OmniDesk.

Each named collection lives in its own JSON document under the data
directory and is read and rewritten in full on every mutation. There is no
lock across a load/transform/save cycle: concurrent writers to the same
collection race and the last write wins.
"""

import json
import logging
import os
import tempfile
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from omnidesk.errors import CorruptStateError, IoFailureError
from omnidesk.models import (
    Alert,
    AppConfig,
    ExchangeCredential,
    PaperWallet,
    PriceSnapshot,
    RecurringSchedule,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Collection(Generic[T]):
    """A list of entities stored under one root key of one JSON file."""

    file_name: str
    root_key: str
    model: Type[T]


ALERTS = Collection("alerts.json", "alerts", Alert)
SCHEDULES = Collection("dca.json", "configs", RecurringSchedule)

CONFIG_FILE = "config.json"
WALLET_FILE = "paper-wallet.json"


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def _symbol_key(symbol: str) -> str:
    return symbol.replace("/", "").upper()


class CollectionStore:
    """Load/replace persistence for JSON documents in one data directory."""

    def __init__(self, data_dir: Path):
        """Initialize the store.

        Args:
            data_dir: Directory holding every collection file. Created lazily
                on first save.
        """
        self.data_dir = Path(data_dir)

    def path(self, file_name: str) -> Path:
        """Get the on-disk path for a file name."""
        return self.data_dir / file_name

    def _read_json(self, path: Path) -> Optional[Any]:
        """Read and decode a JSON file, or None if it does not exist."""
        if not path.exists():
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStateError(path, str(e)) from e
        except OSError as e:
            raise IoFailureError("read", path, e) from e

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise CorruptStateError(path, str(e)) from e

    def _write_json(self, path: Path, payload: Any) -> None:
        """Replace a JSON file in full.

        The content is written to a temporary sibling and renamed over the
        target, so readers never see a partially written file.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailureError("create directory", path.parent, e) from e

        content = json.dumps(payload, indent=2)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise IoFailureError("write", path, e) from e

        logger.debug("Wrote %s (%d bytes)", path, len(content))

    # ==================== Collections ====================

    def load(self, collection: Collection[T]) -> list[T]:
        """Load every entity of a collection.

        Args:
            collection: Collection to load.

        Returns:
            Entities in file order; empty if the file does not exist yet.

        Raises:
            CorruptStateError: If the file does not match the collection schema.
        """
        path = self.path(collection.file_name)
        raw = self._read_json(path)
        if raw is None:
            return []

        if not isinstance(raw, dict) or not isinstance(raw.get(collection.root_key), list):
            raise CorruptStateError(
                path, f"expected an object with a '{collection.root_key}' array"
            )

        try:
            return [collection.model.model_validate(item) for item in raw[collection.root_key]]
        except ValidationError as e:
            raise CorruptStateError(path, str(e)) from e

    def save(self, collection: Collection[T], items: Iterable[T]) -> None:
        """Overwrite a collection with the given entities.

        Args:
            collection: Collection to write.
            items: Entities to persist, in order.
        """
        payload = {
            collection.root_key: [
                item.model_dump(mode="json", by_alias=True) for item in items
            ]
        }
        self._write_json(self.path(collection.file_name), payload)

    # ==================== Documents ====================

    def read_document(self, file_name: str, model: Type[T]) -> Optional[T]:
        """Read a single-object JSON document, or None if absent."""
        path = self.path(file_name)
        raw = self._read_json(path)
        if raw is None:
            return None

        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise CorruptStateError(path, str(e)) from e

    def write_document(
        self, file_name: str, document: BaseModel, exclude_none: bool = False
    ) -> None:
        """Overwrite a single-object JSON document.

        Args:
            file_name: Document file under the data directory.
            document: Model to serialize.
            exclude_none: Omit unset optional keys instead of writing null.
        """
        payload = document.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)
        self._write_json(self.path(file_name), payload)


class LocalStore:
    """Per-entity operations on top of the collection store."""

    def __init__(self, data_dir: Path):
        """Initialize the local store.

        Args:
            data_dir: Application data directory.
        """
        self.collections = CollectionStore(data_dir)

    @property
    def data_dir(self) -> Path:
        return self.collections.data_dir

    # ==================== Alerts ====================

    def get_alerts(self) -> list[Alert]:
        """Get all alerts in creation order."""
        return self.collections.load(ALERTS)

    def add_alert(
        self,
        symbol: str,
        condition: str,
        target_price: float,
        exchange: Optional[str] = "binance",
    ) -> Alert:
        """Append a new alert.

        Args:
            symbol: Trading pair.
            condition: Comparator string (e.g., 'above', 'below').
            target_price: Price that fires the alert.
            exchange: Exchange to watch.

        Returns:
            The stored alert with its generated ID and creation time.
        """
        alerts = self.collections.load(ALERTS)
        created_at = now_millis()
        alert = Alert(
            id=f"alert_{created_at}_{uuid.uuid4().hex[:8]}",
            symbol=symbol,
            condition=condition,
            target_price=target_price,
            created_at=created_at,
            exchange=exchange,
        )
        alerts.append(alert)
        self.collections.save(ALERTS, alerts)
        return alert

    def remove_alert(self, alert_id: str) -> None:
        """Remove an alert by ID. Unknown IDs are a no-op."""
        alerts = self.collections.load(ALERTS)
        self.collections.save(ALERTS, [a for a in alerts if a.id != alert_id])

    def check_alerts(
        self, snapshots: Iterable[PriceSnapshot], now: Optional[int] = None
    ) -> list[Alert]:
        """Mark active alerts whose condition is met by the given prices.

        Args:
            snapshots: Current prices, matched to alerts by symbol.
            now: Trigger timestamp in epoch millis. Defaults to now.

        Returns:
            Alerts that fired during this check.
        """
        prices = {
            _symbol_key(s.symbol): s.price for s in snapshots if s.price > 0
        }
        if not prices:
            return []

        alerts = self.collections.load(ALERTS)
        triggered_at = now if now is not None else now_millis()
        fired: list[Alert] = []
        updated: list[Alert] = []

        for alert in alerts:
            price = prices.get(_symbol_key(alert.symbol))
            hit = (
                not alert.triggered
                and price is not None
                and (
                    (alert.condition == "below" and price <= alert.target_price)
                    or (alert.condition == "above" and price >= alert.target_price)
                )
            )
            if hit:
                alert = alert.model_copy(
                    update={"triggered": True, "triggered_at": triggered_at}
                )
                fired.append(alert)
                logger.info(
                    "Alert %s triggered: %s %s %s (current %s)",
                    alert.id, alert.symbol, alert.condition, alert.target_price, price,
                )
            updated.append(alert)

        if fired:
            self.collections.save(ALERTS, updated)
        return fired

    # ==================== DCA Schedules ====================

    def get_schedules(self) -> list[RecurringSchedule]:
        """Get all recurring purchase schedules."""
        return self.collections.load(SCHEDULES)

    def toggle_schedule(self, schedule_id: str, enabled: bool) -> None:
        """Set the enabled flag on the first schedule with this ID.

        Unknown IDs are a silent no-op; the file is still rewritten.
        """
        schedules = self.collections.load(SCHEDULES)
        for i, schedule in enumerate(schedules):
            if schedule.id == schedule_id:
                schedules[i] = schedule.model_copy(update={"enabled": enabled})
                break
        self.collections.save(SCHEDULES, schedules)

    # ==================== Config ====================

    def load_config(self) -> AppConfig:
        """Load config.json with secrets intact. Never hand this to a UI."""
        config = self.collections.read_document(CONFIG_FILE, AppConfig)
        return config if config is not None else AppConfig.default()

    def get_config(self) -> AppConfig:
        """Load config.json with every exchange credential redacted."""
        return self.load_config().redacted()

    def save_exchange(
        self,
        name: str,
        api_key: str,
        secret: str,
        testnet: bool = False,
        password: Optional[str] = None,
    ) -> None:
        """Insert or replace the credential for one exchange.

        Other exchanges' entries, passphrases included, are written back as read.
        """
        config = self.load_config()
        exchanges = dict(config.exchanges)
        exchanges[name] = ExchangeCredential(
            api_key=api_key, secret=secret, password=password, testnet=testnet
        )
        self.collections.write_document(
            CONFIG_FILE,
            config.model_copy(update={"exchanges": exchanges}),
            exclude_none=True,
        )
        logger.info("Saved credentials for exchange %s", name)

    # ==================== Paper Wallet ====================

    def get_paper_wallet(self) -> PaperWallet:
        """Get the paper wallet, or a fresh default wallet if none exists."""
        wallet = self.collections.read_document(WALLET_FILE, PaperWallet)
        if wallet is None:
            return PaperWallet(created_at=now_millis())
        return wallet
