"""Price snapshot model."""

from pydantic import Field

from omnidesk.models.base import CamelModel


class PriceSnapshot(CamelModel):
    """Point-in-time ticker data for one symbol."""

    symbol: str = Field(..., description="Display symbol (e.g., BTC/USDT)")
    price: float = Field(..., description="Last price")
    change_24h: float = Field(..., alias="change24h", description="24h change, percent")
    volume_24h: float = Field(..., alias="volume24h", description="24h quote volume")
