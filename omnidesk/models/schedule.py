"""Recurring purchase (DCA) schedule model."""

from typing import Literal, Optional

from pydantic import Field

from omnidesk.models.base import CamelModel

Frequency = Literal["daily", "weekly", "monthly"]


class RecurringSchedule(CamelModel):
    """Represents a dollar-cost-averaging schedule."""

    id: str = Field(..., min_length=1, description="Unique schedule ID")
    asset: str = Field(..., description="Asset to buy")
    amount: float = Field(..., gt=0, description="Quote amount per purchase")
    frequency: Frequency = Field(..., description="Purchase frequency")
    enabled: bool = Field(default=True, description="Whether the schedule runs")
    last_run: Optional[int] = Field(default=None, description="Last run, epoch millis")
    next_run: Optional[int] = Field(default=None, description="Next run, epoch millis")
    executions: int = Field(default=0, ge=0, description="Completed purchases")
