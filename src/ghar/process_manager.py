"""Process discovery, launching and signaling helpers."""

import logging
import os
import shlex
import shutil
import signal
import subprocess
import time
from pathlib import Path

from .error_handling import CommandNotExecutableError, CommandNotFoundError

logger = logging.getLogger(__name__)


class ProcessManager:
    """Stateless helpers around the operating system process table."""

    @staticmethod
    def is_process_running(pid: int) -> bool:
        """Check if a process with given PID is running."""
        if pid <= 0:
            return False

        try:
            # Reap our own exited children so they do not linger as zombies
            reaped, _ = os.waitpid(pid, os.WNOHANG)
        except ChildProcessError:
            reaped = 0
        if reaped == pid:
            return False

        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # Exists, but belongs to another user
            return True
        except OSError:
            return False

        return True

    @staticmethod
    def resolve_command(command: str, cwd: Path) -> list[str]:
        """Split a command line and check its executable can be launched.

        Bare names are looked up on PATH. Anything containing a path
        separator is treated as a file, relative to ``cwd`` when not
        absolute. Returns the argument vector with the executable resolved.
        """
        try:
            argv = shlex.split(command)
        except ValueError as e:
            raise CommandNotFoundError(command, details=str(e)) from e

        if not argv:
            raise CommandNotFoundError(command)

        executable = argv[0]
        if os.sep not in executable:
            found = shutil.which(executable)
            if found is None:
                raise CommandNotFoundError(executable)
            return [found, *argv[1:]]

        path = Path(executable).expanduser()
        if not path.is_absolute():
            path = cwd / path

        if not path.is_file():
            raise CommandNotFoundError(str(path))
        if not os.access(path, os.X_OK):
            raise CommandNotExecutableError(str(path))

        return [str(path), *argv[1:]]

    @staticmethod
    def spawn_detached(argv: list[str], cwd: Path, log_file: Path) -> int:
        """Launch a background process in its own session. Returns its PID.

        Output and errors of the process are appended to ``log_file``.
        Raises ``CommandNotExecutableError`` when the operating system
        refuses to execute ``argv[0]``.
        """
        with open(log_file, "ab") as log:
            try:
                process = subprocess.Popen(
                    argv,
                    cwd=cwd,
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    start_new_session=True,
                    close_fds=True,
                )
            except OSError as e:
                raise CommandNotExecutableError(
                    argv[0],
                    details=str(e),
                    original_error=e,
                ) from e

        logger.debug("Spawned %s (PID %d)", argv, process.pid)
        return process.pid

    @staticmethod
    def terminate(pid: int, sig: int = signal.SIGTERM) -> bool:
        """Send a signal to a process. Returns False if it no longer exists.

        ``PermissionError`` is propagated to the caller.
        """
        try:
            os.kill(pid, sig)
        except ProcessLookupError:
            return False
        return True

    @staticmethod
    def wait_for_exit(pid: int, timeout: float, interval: float = 0.1) -> bool:
        """Poll until the process is gone or the timeout expires."""
        deadline = time.monotonic() + timeout
        while ProcessManager.is_process_running(pid):
            if time.monotonic() >= deadline:
                return False
            time.sleep(interval)
        return True

    @staticmethod
    def stop_process(pid: int, timeout: float = 0.0) -> bool:
        """Stop a process gracefully, then forcefully if a timeout is given.

        With ``timeout`` of zero the signal is sent and the call returns
        immediately. Returns False if the process did not exist.
        """
        if not ProcessManager.terminate(pid):
            return False

        if timeout <= 0:
            return True

        if ProcessManager.wait_for_exit(pid, timeout):
            return True

        logger.warning("Process %d still alive after %.1fs, sending SIGKILL", pid, timeout)
        ProcessManager.terminate(pid, signal.SIGKILL)
        ProcessManager.wait_for_exit(pid, 1.0)
        return True
