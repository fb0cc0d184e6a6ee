"""Data models for OmniDesk."""

from omnidesk.models.alert import Alert
from omnidesk.models.config import (
    AppConfig,
    DiscordConfig,
    ExchangeCredential,
    NotificationConfig,
    SecurityConfig,
    TelegramConfig,
    mask_key,
)
from omnidesk.models.daemon import DaemonStatus
from omnidesk.models.price import PriceSnapshot
from omnidesk.models.schedule import RecurringSchedule
from omnidesk.models.wallet import Holding, PaperWallet, PortfolioData

__all__ = [
    "Alert",
    "AppConfig",
    "DaemonStatus",
    "DiscordConfig",
    "ExchangeCredential",
    "Holding",
    "NotificationConfig",
    "PaperWallet",
    "PortfolioData",
    "PriceSnapshot",
    "RecurringSchedule",
    "SecurityConfig",
    "TelegramConfig",
    "mask_key",
]
