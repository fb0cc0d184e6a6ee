"""Exchange credential and application config models."""

from typing import Dict, Optional

from pydantic import Field

from omnidesk.models.base import CamelModel

MASKED_SECRET = "********"
MASKED_SHORT_KEY = "***"


def mask_key(key: str) -> str:
    """Redact an API key, keeping only its first and last 5 characters.

    Keys shorter than 10 characters collapse to a fixed placeholder.
    """
    if len(key) < 10:
        return MASKED_SHORT_KEY
    return f"{key[:5]}...{key[-5:]}"


class ExchangeCredential(CamelModel):
    """API credentials for one exchange."""

    api_key: str = Field(..., description="Exchange API key")
    secret: str = Field(..., description="Exchange API secret")
    password: Optional[str] = Field(
        default=None, description="API passphrase (coinbase, kucoin, okx)"
    )
    testnet: bool = Field(default=False, description="Use the exchange testnet")

    def redacted(self) -> "ExchangeCredential":
        """Return a copy safe to show outside the store."""
        update = {"api_key": mask_key(self.api_key), "secret": MASKED_SECRET}
        if self.password is not None:
            update["password"] = MASKED_SECRET
        return self.model_copy(update=update)


class SecurityConfig(CamelModel):
    """Trade safety limits (pass-through)."""

    max_order_size: float = Field(default=100.0)
    confirm_trades: bool = Field(default=True)


class TelegramConfig(CamelModel):
    """Telegram bot channel (pass-through)."""

    enabled: bool = False
    bot_token: Optional[str] = None
    chat_id: Optional[str] = None


class DiscordConfig(CamelModel):
    """Discord webhook channel (pass-through)."""

    enabled: bool = False
    webhook_url: Optional[str] = None


class NotificationConfig(CamelModel):
    """Notification channels (pass-through)."""

    native: Optional[bool] = None
    telegram: Optional[TelegramConfig] = None
    discord: Optional[DiscordConfig] = None


class AppConfig(CamelModel):
    """Contents of config.json."""

    exchanges: Dict[str, ExchangeCredential] = Field(default_factory=dict)
    security: Optional[SecurityConfig] = None
    notifications: Optional[NotificationConfig] = None

    @classmethod
    def default(cls) -> "AppConfig":
        """Config used when no config file exists yet."""
        return cls(security=SecurityConfig())

    def redacted(self) -> "AppConfig":
        """Return a copy with every exchange credential redacted."""
        return self.model_copy(
            update={
                "exchanges": {
                    name: cred.redacted() for name, cred in self.exchanges.items()
                }
            }
        )
