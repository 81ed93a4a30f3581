"""Persisted runner state: PID record and lifecycle log."""

import logging
import socket
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

PID_FILE = "runner.pid"
LOG_FILE = "runner.log"


@dataclass
class WorkerRecord:
    """Snapshot of the supervised runner as found on disk.

    Loaded fresh for every operation; nothing here is kept between
    invocations except what ``save`` writes to ``pid_file``.
    """

    runner_path: Path
    state_path: Path
    pid: int | None = None

    @property
    def pid_file(self) -> Path:
        return self.state_path / PID_FILE

    @property
    def log_file(self) -> Path:
        return self.state_path / LOG_FILE

    @classmethod
    def load(cls, runner_path: Path, state_path: Path) -> "WorkerRecord":
        """Read the PID record, if any, from the state directory."""
        record = cls(runner_path=runner_path, state_path=state_path)

        try:
            text = record.pid_file.read_text().strip()
        except FileNotFoundError:
            return record
        except OSError as e:
            logger.warning("Ignoring unreadable PID file %s: %s", record.pid_file, e)
            return record

        try:
            record.pid = int(text)
        except ValueError:
            logger.warning("Ignoring malformed PID file %s: %r", record.pid_file, text)

        return record

    def ensure_state_dir(self) -> None:
        """Create the state directory if it doesn't exist."""
        self.state_path.mkdir(parents=True, exist_ok=True)

    def save(self, pid: int) -> None:
        """Persist ``pid``, overwriting any previous record."""
        self.pid_file.write_text(f"{pid}\n")
        self.pid = pid

    def clear(self) -> None:
        """Remove the PID record. A missing record is not an error."""
        self.pid_file.unlink(missing_ok=True)
        self.pid = None

    def log_event(self, event: str) -> None:
        """Append a timestamped lifecycle line to the runner log."""
        timestamp = datetime.now().astimezone().isoformat(timespec="seconds")
        with open(self.log_file, "a") as f:
            f.write(f"[{timestamp}] {event} on {socket.gethostname()}\n")
