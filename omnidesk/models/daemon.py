"""Daemon status model."""

from typing import Optional

from pydantic import Field

from omnidesk.models.base import CamelModel


class DaemonStatus(CamelModel):
    """Derived liveness of the companion daemon."""

    running: bool = Field(..., description="Whether the daemon process is alive")
    pid: Optional[int] = Field(default=None, description="OS process ID")
    uptime: Optional[str] = Field(default=None, description="Uptime, e.g. '2h 5m'")

    @classmethod
    def stopped(cls) -> "DaemonStatus":
        return cls(running=False)
