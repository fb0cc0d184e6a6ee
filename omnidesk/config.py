"""Settings and data directory resolution for OmniDesk.

The data directory is shared with the OmniTrade daemon: ``~/.omnitrade`` by
default, overridable with ``OMNIDESK_HOME``. Tunables live in an optional
``settings.toml`` inside that directory.
"""

import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from omnidesk.errors import CorruptStateError, IoFailureError, NotFoundError

HOME_ENV_VAR = "OMNIDESK_HOME"
DATA_DIR_NAME = ".omnitrade"
SETTINGS_FILE = "settings.toml"

DEFAULT_SYMBOLS = [
    "BTC/USDT",
    "ETH/USDT",
    "SOL/USDT",
    "BNB/USDT",
    "XRP/USDT",
    "ADA/USDT",
]


class MarketSettings(BaseModel):
    base_url: str = "https://api.binance.com"
    poll_interval: float = Field(default=5.0, gt=0)
    timeout: float = Field(default=10.0, gt=0)
    symbols: list[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOLS))


class DaemonSettings(BaseModel):
    executable: str = "omnitrade"
    timeout: float = Field(default=30.0, gt=0)


class LoggingSettings(BaseModel):
    level: str = "WARNING"


class Settings(BaseModel):
    """Runtime settings for the companion."""

    data_dir: Path
    market: MarketSettings = Field(default_factory=MarketSettings)
    daemon: DaemonSettings = Field(default_factory=DaemonSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def pid_path(self) -> Path:
        return self.data_dir / "daemon.pid"

    @property
    def log_path(self) -> Path:
        return self.data_dir / "daemon.log"


def resolve_data_dir() -> Path:
    """Resolve the application data directory.

    Raises:
        NotFoundError: If neither OMNIDESK_HOME nor the home directory is available.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()

    try:
        home = Path.home()
    except RuntimeError as e:
        raise NotFoundError(f"Could not find home directory: {e}") from e
    return home / DATA_DIR_NAME


def load_settings(data_dir: Optional[Path] = None) -> Settings:
    """Load settings from ``settings.toml``, falling back to defaults.

    Args:
        data_dir: Data directory to use instead of the resolved default.

    Returns:
        Settings for this process.
    """
    data_dir = data_dir or resolve_data_dir()
    settings_path = data_dir / SETTINGS_FILE

    if not settings_path.exists():
        return Settings(data_dir=data_dir)

    try:
        raw = toml.load(settings_path)
    except toml.TomlDecodeError as e:
        raise CorruptStateError(settings_path, str(e)) from e
    except OSError as e:
        raise IoFailureError("read", settings_path, e) from e

    try:
        return Settings.model_validate({**raw, "data_dir": data_dir})
    except ValidationError as e:
        raise CorruptStateError(settings_path, str(e)) from e
