"""Supervision of the external OmniTrade daemon."""

from omnidesk.daemon.supervisor import DaemonSupervisor, format_uptime

__all__ = ["DaemonSupervisor", "format_uptime"]
