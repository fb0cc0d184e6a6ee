"""Alert data model."""

from typing import Optional

from pydantic import Field, model_validator

from omnidesk.models.base import CamelModel


class Alert(CamelModel):
    """Represents a price alert."""

    id: str = Field(..., min_length=1, description="Unique alert ID")
    symbol: str = Field(..., description="Trading pair (e.g., BTC/USDT)")
    condition: str = Field(..., description="Comparator (e.g., 'above', 'below')")
    target_price: float = Field(..., description="Price that fires the alert")
    created_at: int = Field(..., description="Creation time, epoch millis")
    triggered: bool = Field(default=False, description="Whether alert has triggered")
    triggered_at: Optional[int] = Field(default=None, description="Trigger time, epoch millis")
    exchange: Optional[str] = Field(default=None, description="Exchange to watch")

    @model_validator(mode="after")
    def _triggered_needs_timestamp(self) -> "Alert":
        if self.triggered and self.triggered_at is None:
            raise ValueError("triggered alert must have triggeredAt")
        return self
