"""Runner lifecycle management: start, stop, restart and status."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..config import GharConfig
from ..error_handling import PathNotFoundError, SignalDeliveryError
from ..process_manager import ProcessManager
from .state import WorkerRecord

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """What a lifecycle operation ended up doing."""

    STARTED = "started"
    ALREADY_RUNNING = "already_running"
    STOPPED = "stopped"
    ALREADY_STOPPED = "already_stopped"


class RunnerStatus(Enum):
    """Liveness of the supervised runner."""

    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class LifecycleResult:
    """Result of start, stop or restart."""

    outcome: Outcome
    pid: int | None = None


@dataclass
class StatusResult:
    """Result of a status query."""

    status: RunnerStatus
    pid: int | None = None

    @property
    def is_running(self) -> bool:
        return self.status is RunnerStatus.RUNNING


class RunnerSupervisor:
    """Supervises a single runner identified by its runner and state paths."""

    def __init__(
        self,
        config: GharConfig,
        runner_path: Path,
        state_path: Path | None = None,
    ):
        self.config = config
        self.runner_path = runner_path.expanduser().resolve()
        if state_path is not None:
            self.state_path = state_path.expanduser().resolve()
        else:
            self.state_path = config.resolve_state_path(self.runner_path)

    def _load(self) -> WorkerRecord:
        return WorkerRecord.load(self.runner_path, self.state_path)

    @staticmethod
    def _record_is_live(record: WorkerRecord) -> bool:
        if record.pid is None:
            return False
        return ProcessManager.is_process_running(record.pid)

    def is_running(self) -> bool:
        """Check the recorded PID against the process table.

        No record means not running; a record pointing at a dead process
        is stale and also means not running.
        """
        return self._record_is_live(self._load())

    def start(self, command: str | None = None, *, force: bool = False) -> LifecycleResult:
        """Launch the runner in the background and record its PID."""
        if not self.runner_path.is_dir():
            raise PathNotFoundError(self.runner_path)

        record = self._load()
        if not force and self._record_is_live(record):
            logger.debug("The runner is already running (PID %d)", record.pid)
            return LifecycleResult(Outcome.ALREADY_RUNNING, record.pid)

        if force and self._record_is_live(record):
            logger.warning(
                "Forcing start while PID %d is alive; it will no longer be tracked",
                record.pid,
            )

        command_line = command or self.config.command or self.config.default_command
        argv = ProcessManager.resolve_command(command_line, self.runner_path)

        record.ensure_state_dir()

        pid = ProcessManager.spawn_detached(argv, self.runner_path, record.log_file)
        logger.info("Starting runner")
        record.log_event("Starting runner")

        logger.debug("Creating PID file %s", record.pid_file)
        record.save(pid)

        logger.debug("Runner started (PID %d)", pid)
        return LifecycleResult(Outcome.STARTED, pid)

    def stop(self, *, timeout: float | None = None) -> LifecycleResult:
        """Signal the runner to terminate and remove its PID record.

        By default SIGTERM is sent without waiting. A positive ``timeout``
        (or ``stop_timeout`` in the config) waits for the process to exit
        and escalates to SIGKILL when it expires.
        """
        if timeout is None:
            timeout = self.config.stop_timeout

        record = self._load()
        record.ensure_state_dir()

        result = LifecycleResult(Outcome.ALREADY_STOPPED)
        if self._record_is_live(record):
            pid = record.pid
            logger.info("Stopping runner (PID %d)", pid)
            record.log_event("Stopping runner")
            try:
                delivered = ProcessManager.stop_process(pid, timeout)
            except PermissionError as e:
                raise SignalDeliveryError(pid, original_error=e) from e

            if delivered:
                result = LifecycleResult(Outcome.STOPPED, pid)
            else:
                logger.debug("PID %d exited before it could be signaled", pid)

        if result.outcome is Outcome.ALREADY_STOPPED:
            logger.debug("Runner already stopped")
            record.log_event("Runner already stopped")

        logger.debug("Removing PID file %s", record.pid_file)
        record.clear()
        return result

    def restart(
        self,
        command: str | None = None,
        *,
        force: bool = False,
        timeout: float | None = None,
    ) -> LifecycleResult:
        """Stop, wait ``restart_delay`` seconds, then start."""
        self.stop(timeout=timeout)

        if self.config.restart_delay > 0:
            logger.debug("Waiting %.1fs before starting", self.config.restart_delay)
            time.sleep(self.config.restart_delay)

        return self.start(command, force=force)

    def status(self) -> StatusResult:
        """Report whether the runner is alive. Read-only."""
        record = self._load()
        if self._record_is_live(record):
            return StatusResult(RunnerStatus.RUNNING, record.pid)
        return StatusResult(RunnerStatus.STOPPED)
