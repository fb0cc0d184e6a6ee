"""Lifecycle control for the OmniTrade daemon.

The daemon owns its PID marker file: it writes the file on startup and the
supervisor only reads it, or removes it once the process is gone.
"""

import logging
import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Optional

from omnidesk.errors import CorruptStateError, IoFailureError, ProcessControlError
from omnidesk.models import DaemonStatus

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


def format_uptime(seconds: float) -> str:
    """Format elapsed seconds as "Xh Ym", or "Ym" under an hour."""
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def is_process_running(pid: int) -> bool:
    """Check whether a process with this ID exists."""
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}"],
                capture_output=True,
                text=True,
            )
        except OSError:
            return False
        return str(pid) in result.stdout

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by another user
        return True
    except OSError:
        return False
    return True


def terminate_process(pid: int) -> None:
    """Ask a process to shut down.

    Raises:
        ProcessControlError: If the signal could not be delivered.
    """
    try:
        if IS_WINDOWS:
            subprocess.run(
                ["taskkill", "/PID", str(pid), "/F"],
                capture_output=True,
                check=True,
            )
        else:
            os.kill(pid, signal.SIGTERM)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ProcessControlError(f"Failed to stop daemon: {e}") from e


class DaemonSupervisor:
    """Controls the daemon through its PID marker file."""

    def __init__(
        self,
        pid_path: Path,
        log_path: Path,
        executable: str = "omnitrade",
        timeout: Optional[float] = 30.0,
    ):
        """Initialize the supervisor.

        Args:
            pid_path: Marker file written by the daemon.
            log_path: Log file appended to by the daemon.
            executable: CLI providing the ``daemon start`` subcommand.
            timeout: Seconds to wait for ``daemon start`` to exit.
        """
        self.pid_path = Path(pid_path)
        self.log_path = Path(log_path)
        self.executable = executable
        self.timeout = timeout

    def _read_pid(self) -> int:
        try:
            content = self.pid_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStateError(self.pid_path, str(e)) from e
        except OSError as e:
            raise IoFailureError("read", self.pid_path, e) from e

        # Only a plain positive decimal; -1 and 0 would signal process groups
        text = content.strip()
        if not (text.isascii() and text.isdigit()) or int(text) <= 0:
            raise CorruptStateError(self.pid_path, f"invalid PID {text!r}")
        return int(text)

    def _remove_marker(self) -> None:
        try:
            self.pid_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove %s: %s", self.pid_path, e)

    def status(self) -> DaemonStatus:
        """Get the daemon's liveness.

        A marker pointing at a dead process is removed as a side effect.

        Raises:
            CorruptStateError: If the marker file does not hold a positive PID.
        """
        if not self.pid_path.exists():
            return DaemonStatus.stopped()

        pid = self._read_pid()

        if not is_process_running(pid):
            logger.info("Removing stale PID file for dead process %d", pid)
            self._remove_marker()
            return DaemonStatus.stopped()

        try:
            modified = self.pid_path.stat().st_mtime
            uptime = format_uptime(time.time() - modified)
        except OSError:
            uptime = None

        return DaemonStatus(running=True, pid=pid, uptime=uptime)

    def start(self) -> None:
        """Launch the daemon via ``<executable> daemon start``.

        Raises:
            ProcessControlError: If the daemon is already running, cannot be
                spawned, times out or exits nonzero.
        """
        if self.status().running:
            raise ProcessControlError("Daemon is already running")

        command = [self.executable, "daemon", "start"]
        logger.info("Starting daemon: %s", " ".join(command))

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ProcessControlError(
                f"Daemon start did not finish within {self.timeout}s"
            ) from e
        except OSError as e:
            raise ProcessControlError(f"Failed to start daemon: {e}") from e

        if result.returncode != 0:
            raise ProcessControlError(
                f"Daemon failed to start: {result.stderr.strip()}",
                details={"returncode": result.returncode},
            )

    def stop(self) -> None:
        """Send a termination signal to the daemon and remove its marker.

        Raises:
            ProcessControlError: If the daemon is not running or the signal
                could not be delivered.
        """
        status = self.status()
        if not status.running or status.pid is None:
            raise ProcessControlError("Daemon is not running")

        logger.info("Stopping daemon (PID %d)", status.pid)
        terminate_process(status.pid)
        self._remove_marker()

    def tail_log(self, lines: int = 50) -> list[str]:
        """Get the last lines of the daemon log.

        Args:
            lines: Maximum number of lines to return.

        Returns:
            Up to ``lines`` lines in file order; empty if there is no log.
        """
        if lines <= 0 or not self.log_path.exists():
            return []

        try:
            content = self.log_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise IoFailureError("read", self.log_path, e) from e

        all_lines = content.split("\n")
        if all_lines and all_lines[-1] == "":
            all_lines.pop()
        all_lines = [line[:-1] if line.endswith("\r") else line for line in all_lines]

        return all_lines[-lines:]
