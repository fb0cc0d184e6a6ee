"""Property-based tests for the JSON collection store.

**Feature: desktop-companion**
"""

import json
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from omnidesk.db.store import ALERTS, SCHEDULES, CollectionStore, LocalStore
from omnidesk.errors import CorruptStateError
from omnidesk.models import Alert, PriceSnapshot, RecurringSchedule


symbol_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Nd")),
    min_size=1,
    max_size=10,
).map(lambda base: f"{base}/USDT")

price_strategy = st.floats(min_value=0.0001, max_value=1e7, allow_nan=False, allow_infinity=False)


@st.composite
def alert_lists(draw):
    """Lists of alerts with unique IDs."""
    count = draw(st.integers(min_value=0, max_value=15))
    alerts = []
    for i in range(count):
        triggered = draw(st.booleans())
        alerts.append(Alert(
            id=f"alert_{i}",
            symbol=draw(symbol_strategy),
            condition=draw(st.sampled_from(["above", "below"])),
            target_price=draw(price_strategy),
            created_at=draw(st.integers(min_value=0, max_value=2**41)),
            triggered=triggered,
            triggered_at=draw(st.integers(min_value=0, max_value=2**41)) if triggered else None,
            exchange=draw(st.one_of(st.none(), st.just("binance"))),
        ))
    return alerts


@pytest.fixture
def temp_store():
    """Create a store in a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield LocalStore(Path(tmpdir) / ".omnitrade")


def _schedule(schedule_id: str, enabled: bool = True) -> RecurringSchedule:
    return RecurringSchedule(
        id=schedule_id,
        asset="BTC",
        amount=50.0,
        frequency="weekly",
        enabled=enabled,
    )


class TestCollectionRoundTrip:
    """
    *For any* valid collection, save then load returns the same entities,
    and a missing file loads as an empty collection.
    """

    def test_missing_file_loads_empty(self, temp_store: LocalStore):
        assert temp_store.get_alerts() == []
        assert temp_store.get_schedules() == []
        assert not temp_store.data_dir.exists()

    @given(alerts=alert_lists())
    @settings(max_examples=50)
    def test_save_load_round_trip(self, alerts: list[Alert]):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = CollectionStore(Path(tmpdir) / "data")

            store.save(ALERTS, alerts)
            loaded = store.load(ALERTS)
            first_bytes = store.path(ALERTS.file_name).read_text()

            store.save(ALERTS, loaded)
            second_bytes = store.path(ALERTS.file_name).read_text()

            assert loaded == alerts
            assert first_bytes == second_bytes

    def test_empty_collection_round_trip(self, temp_store: LocalStore):
        temp_store.collections.save(SCHEDULES, [])

        assert temp_store.get_schedules() == []
        raw = json.loads((temp_store.data_dir / "dca.json").read_text())
        assert raw == {"configs": []}

    def test_save_creates_missing_directories(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = Path(tmpdir) / "a" / "b" / "c"
            store = CollectionStore(data_dir)

            store.save(SCHEDULES, [_schedule("dca_1")])

            assert (data_dir / "dca.json").exists()
            assert not list(data_dir.glob("*.tmp"))

    def test_files_use_camel_case_keys(self, temp_store: LocalStore):
        temp_store.add_alert("BTC/USDT", "above", 70000.0)

        raw = json.loads((temp_store.data_dir / "alerts.json").read_text())
        alert = raw["alerts"][0]
        assert set(alert) == {
            "id", "symbol", "condition", "targetPrice", "createdAt",
            "triggered", "triggeredAt", "exchange",
        }


class TestCorruptState:
    """A persisted file that fails schema parsing is reported, never repaired."""

    def test_invalid_json(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        path = temp_store.data_dir / "alerts.json"
        path.write_text("{not json")

        with pytest.raises(CorruptStateError) as exc_info:
            temp_store.get_alerts()

        assert "alerts.json" in exc_info.value.message
        assert path.read_text() == "{not json"

    def test_undecodable_bytes(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        path = temp_store.data_dir / "alerts.json"
        path.write_bytes(b'{"alerts": [\xff\xfe]}')

        with pytest.raises(CorruptStateError) as exc_info:
            temp_store.get_alerts()

        assert "alerts.json" in exc_info.value.message
        assert path.read_bytes() == b'{"alerts": [\xff\xfe]}'

    def test_missing_root_key(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        (temp_store.data_dir / "dca.json").write_text('{"schedules": []}')

        with pytest.raises(CorruptStateError):
            temp_store.get_schedules()

    def test_entity_schema_violation(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        (temp_store.data_dir / "dca.json").write_text(json.dumps({
            "configs": [{"id": "x", "asset": "BTC", "amount": -1, "frequency": "daily",
                         "enabled": True, "executions": 0}]
        }))

        with pytest.raises(CorruptStateError):
            temp_store.get_schedules()

    def test_triggered_alert_without_timestamp(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        (temp_store.data_dir / "alerts.json").write_text(json.dumps({
            "alerts": [{"id": "a", "symbol": "BTC/USDT", "condition": "above",
                        "targetPrice": 1.0, "createdAt": 0, "triggered": True}]
        }))

        with pytest.raises(CorruptStateError):
            temp_store.get_alerts()

    def test_mutation_on_corrupt_file_does_not_overwrite(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        path = temp_store.data_dir / "alerts.json"
        path.write_text("[]")

        with pytest.raises(CorruptStateError):
            temp_store.add_alert("BTC/USDT", "above", 1.0)

        assert path.read_text() == "[]"


class TestAlertAddRemove:
    """
    *For any* serial sequence of adds and removes, the persisted alerts
    equal the inserts minus the removed IDs, in insertion order.
    """

    @given(
        entries=st.lists(
            st.tuples(symbol_strategy, st.sampled_from(["above", "below"]), price_strategy),
            min_size=1,
            max_size=8,
        ),
        remove_mask=st.lists(st.booleans(), min_size=8, max_size=8),
        interleave=st.booleans(),
    )
    @settings(max_examples=30, deadline=None)
    def test_add_remove_consistency(self, entries, remove_mask, interleave):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = LocalStore(Path(tmpdir))
            added: list[Alert] = []
            removed: set[str] = set()

            for i, (symbol, condition, price) in enumerate(entries):
                alert = store.add_alert(symbol, condition, price)
                added.append(alert)
                if interleave and remove_mask[i]:
                    store.remove_alert(alert.id)
                    removed.add(alert.id)

            if not interleave:
                for i, alert in enumerate(added):
                    if remove_mask[i]:
                        store.remove_alert(alert.id)
                        removed.add(alert.id)

            expected = [a for a in added if a.id not in removed]
            assert store.get_alerts() == expected

    def test_add_assigns_id_and_timestamp(self, temp_store: LocalStore):
        first = temp_store.add_alert("BTC/USDT", "above", 70000.0)
        second = temp_store.add_alert("BTC/USDT", "above", 70000.0)

        assert first.id.startswith("alert_")
        assert first.id != second.id
        assert first.created_at > 0
        assert first.triggered is False
        assert first.triggered_at is None
        assert first.exchange == "binance"

    def test_remove_nonexistent_is_noop(self, temp_store: LocalStore):
        alert = temp_store.add_alert("ETH/USDT", "below", 2500.0)

        temp_store.remove_alert("alert_does_not_exist")

        assert temp_store.get_alerts() == [alert]

    def test_remove_on_empty_store(self, temp_store: LocalStore):
        temp_store.remove_alert("anything")

        assert temp_store.get_alerts() == []


class TestAlertCheck:
    """Active alerts fire when the polled price crosses their target."""

    def _snap(self, symbol: str, price: float) -> PriceSnapshot:
        return PriceSnapshot(symbol=symbol, price=price, change_24h=0.0, volume_24h=0.0)

    def test_above_and_below(self, temp_store: LocalStore):
        above = temp_store.add_alert("BTC/USDT", "above", 70000.0)
        below = temp_store.add_alert("ETH/USDT", "below", 2000.0)
        idle = temp_store.add_alert("SOL/USDT", "below", 100.0)

        fired = temp_store.check_alerts(
            [
                self._snap("BTC/USDT", 70000.0),
                self._snap("ETH/USDT", 1999.5),
                self._snap("SOL/USDT", 150.0),
            ],
            now=1234,
        )

        assert [a.id for a in fired] == [above.id, below.id]
        stored = {a.id: a for a in temp_store.get_alerts()}
        assert stored[above.id].triggered and stored[above.id].triggered_at == 1234
        assert stored[below.id].triggered
        assert not stored[idle.id].triggered

    def test_already_triggered_does_not_fire_again(self, temp_store: LocalStore):
        temp_store.add_alert("BTC/USDT", "above", 1.0)
        snapshots = [self._snap("BTC/USDT", 5.0)]

        assert len(temp_store.check_alerts(snapshots, now=1)) == 1
        assert temp_store.check_alerts(snapshots, now=2) == []
        assert temp_store.get_alerts()[0].triggered_at == 1

    def test_exchange_symbols_match_display_symbols(self, temp_store: LocalStore):
        temp_store.add_alert("BTCUSDT", "below", 60000.0)

        fired = temp_store.check_alerts([self._snap("BTC/USDT", 59000.0)])

        assert len(fired) == 1

    def test_zero_price_never_fires(self, temp_store: LocalStore):
        temp_store.add_alert("BTC/USDT", "below", 60000.0)

        assert temp_store.check_alerts([self._snap("BTC/USDT", 0.0)]) == []

    def test_unknown_condition_never_fires(self, temp_store: LocalStore):
        temp_store.add_alert("BTC/USDT", "crosses", 60000.0)

        assert temp_store.check_alerts([self._snap("BTC/USDT", 60000.0)]) == []


class TestScheduleToggle:
    """Toggling changes only the enabled flag of the matching schedule."""

    def test_toggle_sets_enabled(self, temp_store: LocalStore):
        temp_store.collections.save(SCHEDULES, [_schedule("dca_1"), _schedule("dca_2")])

        temp_store.toggle_schedule("dca_2", False)

        schedules = temp_store.get_schedules()
        assert schedules[0] == _schedule("dca_1")
        assert schedules[1] == _schedule("dca_2", enabled=False)

    def test_toggle_only_first_duplicate(self, temp_store: LocalStore):
        temp_store.collections.save(SCHEDULES, [_schedule("dup"), _schedule("dup")])

        temp_store.toggle_schedule("dup", False)

        assert [s.enabled for s in temp_store.get_schedules()] == [False, True]

    def test_toggle_nonexistent_is_noop(self, temp_store: LocalStore):
        temp_store.collections.save(SCHEDULES, [_schedule("dca_1")])

        temp_store.toggle_schedule("missing", False)

        assert temp_store.get_schedules() == [_schedule("dca_1")]

    def test_toggle_preserves_execution_fields(self, temp_store: LocalStore):
        schedule = _schedule("dca_1").model_copy(
            update={"last_run": 100, "next_run": 200, "executions": 7}
        )
        temp_store.collections.save(SCHEDULES, [schedule])

        temp_store.toggle_schedule("dca_1", False)

        loaded = temp_store.get_schedules()[0]
        assert (loaded.last_run, loaded.next_run, loaded.executions) == (100, 200, 7)


class TestExchangeCredentials:
    """Credentials are stored verbatim and only ever read back redacted."""

    def test_default_config_when_missing(self, temp_store: LocalStore):
        config = temp_store.get_config()

        assert config.exchanges == {}
        assert config.security is not None
        assert config.security.max_order_size == 100.0
        assert config.security.confirm_trades is True
        assert config.notifications is None

    def test_save_then_get_is_redacted(self, temp_store: LocalStore):
        temp_store.save_exchange("binance", "ABCDEFGHIJKLMNOP", "topsecretvalue", True)

        redacted = temp_store.get_config().exchanges["binance"]
        raw = json.loads((temp_store.data_dir / "config.json").read_text())

        assert redacted.api_key == "ABCDE...LMNOP"
        assert redacted.secret == "********"
        assert redacted.testnet is True
        assert raw["exchanges"]["binance"] == {
            "apiKey": "ABCDEFGHIJKLMNOP",
            "secret": "topsecretvalue",
            "testnet": True,
        }

    def test_upsert_replaces_and_preserves_others(self, temp_store: LocalStore):
        temp_store.save_exchange("binance", "key-one-long", "s1", False)
        temp_store.save_exchange("bybit", "key-two-long", "s2", False)
        temp_store.save_exchange("binance", "key-three-long", "s3", True)

        config = temp_store.load_config()
        assert set(config.exchanges) == {"binance", "bybit"}
        assert config.exchanges["binance"].api_key == "key-three-long"
        assert config.exchanges["bybit"].secret == "s2"

    def test_pass_through_sections_survive_upsert(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        (temp_store.data_dir / "config.json").write_text(json.dumps({
            "exchanges": {},
            "security": {"maxOrderSize": 250.0, "confirmTrades": False},
            "notifications": {"native": True, "telegram": {"enabled": True, "botToken": "t", "chatId": "c"}},
        }))

        temp_store.save_exchange("kraken", "abcdefghijkl", "secret", False)

        config = temp_store.load_config()
        assert config.security.max_order_size == 250.0
        assert config.notifications.telegram.bot_token == "t"

    def test_passphrase_survives_other_upsert(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        (temp_store.data_dir / "config.json").write_text(json.dumps({
            "exchanges": {
                "okx": {"apiKey": "okx-key-long", "secret": "s", "password": "pp", "testnet": False},
            },
        }))

        temp_store.save_exchange("binance", "binance-key-long", "s2", False)

        raw = json.loads((temp_store.data_dir / "config.json").read_text())
        assert raw["exchanges"]["okx"]["password"] == "pp"
        assert "password" not in raw["exchanges"]["binance"]
        assert temp_store.get_config().exchanges["okx"].password == "********"

    def test_save_with_passphrase(self, temp_store: LocalStore):
        temp_store.save_exchange("kucoin", "kucoin-key-long", "s", False, password="phrase")

        assert temp_store.load_config().exchanges["kucoin"].password == "phrase"
        assert temp_store.get_config().exchanges["kucoin"].password == "********"


class TestPaperWallet:
    """The paper wallet is read-only here and defaults to 10,000 USDT."""

    def test_default_wallet(self, temp_store: LocalStore):
        wallet = temp_store.get_paper_wallet()

        assert wallet.version == 1
        assert wallet.usdt == 10000.0
        assert wallet.holdings == {}
        assert not (temp_store.data_dir / "paper-wallet.json").exists()

    def test_existing_wallet(self, temp_store: LocalStore):
        temp_store.data_dir.mkdir(parents=True)
        (temp_store.data_dir / "paper-wallet.json").write_text(json.dumps({
            "version": 1,
            "createdAt": 1700000000000,
            "usdt": 8500.0,
            "holdings": {
                "BTC": {"asset": "BTC", "amount": 0.025, "avgBuyPrice": 60000.0, "totalCost": 1500.0}
            },
        }))

        wallet = temp_store.get_paper_wallet()

        assert wallet.usdt == 8500.0
        assert wallet.holdings["BTC"].avg_buy_price == 60000.0
