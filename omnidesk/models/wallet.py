"""Paper wallet and portfolio models."""

from typing import Dict

from pydantic import Field

from omnidesk.models.base import CamelModel

DEFAULT_PAPER_BALANCE = 10000.0
WALLET_VERSION = 1


class Holding(CamelModel):
    """A position held in a wallet."""

    asset: str = Field(..., description="Asset symbol")
    amount: float = Field(..., description="Units held")
    avg_buy_price: float = Field(..., description="Average buy price")
    total_cost: float = Field(..., description="Total quote spent")


class PaperWallet(CamelModel):
    """Simulated trading wallet."""

    version: int = Field(default=WALLET_VERSION, description="Schema version")
    created_at: int = Field(..., description="Creation time, epoch millis")
    usdt: float = Field(default=DEFAULT_PAPER_BALANCE, description="USDT balance")
    holdings: Dict[str, Holding] = Field(default_factory=dict)


class PortfolioData(CamelModel):
    """Live exchange portfolio summary."""

    total_value: float = 0.0
    holdings: list[Holding] = Field(default_factory=list)
