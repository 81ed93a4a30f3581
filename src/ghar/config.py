"""Configuration management for the runner manager."""

from pathlib import Path

import tomli
from pydantic import BaseModel, Field, field_validator

CONFIG_DIRNAME = "manage-ghar"


class GharConfig(BaseModel):
    """Defaults for supervising a runner, overridable from the command line."""

    # Paths - state_path falls back to <runner_path>/<state_dirname>
    state_path: Path | None = None
    state_dirname: str = Field(default="state")

    # Launch command - relative paths resolve against the runner directory
    command: str | None = None
    default_command: str = Field(default="bin/runsvc.sh")

    # Start even if the runner already appears to be running
    force: bool = Field(default=False)

    # Timing (seconds)
    restart_delay: float = Field(default=1.0, ge=0)  # Grace period between stop and start
    stop_timeout: float = Field(default=0.0, ge=0)  # 0 sends SIGTERM without waiting

    @field_validator("state_path", mode="before")
    @classmethod
    def expand_paths(cls, v: Path | str | None) -> Path | None:
        """Expand user home directory in paths."""
        if v is None:
            return None
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser().resolve()

    @field_validator("command", mode="after")
    @classmethod
    def blank_command_is_default(cls, v: str | None) -> str | None:
        """Treat an empty command as no override."""
        if v is not None and not v.strip():
            return None
        return v

    def resolve_state_path(self, runner_path: Path) -> Path:
        """Return the state directory for a runner directory."""
        if self.state_path is not None:
            return self.state_path
        return runner_path / self.state_dirname


def default_config_paths() -> list[Path]:
    """Config locations checked in order when no path is given."""
    return [
        Path.home() / ".config" / CONFIG_DIRNAME / "config.toml",  # User config
        Path.cwd() / f"{CONFIG_DIRNAME}.toml",  # Current directory
    ]


def load_config(config_path: Path | None = None) -> GharConfig:
    """Load configuration from file or defaults."""
    if config_path is None:
        for path in default_config_paths():
            if path.exists():
                config_path = path
                break

    if config_path and config_path.exists():
        with open(config_path, "rb") as f:
            config_data = tomli.load(f)
        return GharConfig(**config_data)
    return GharConfig()


def create_sample_config(path: Path) -> None:
    """Create a sample configuration file."""
    sample_config = """# manage-ghar Configuration
# =========================
# Every setting is optional. Command-line options take precedence.

# State directory holding runner.pid and runner.log.
# Defaults to the "state" subdirectory of the runner directory.
# state_path = "~/.local/share/manage-ghar/state"
state_dirname = "state"

# Command used to launch the runner, relative to the runner directory
# or a name on your PATH.
# command = "./run.sh"
default_command = "bin/runsvc.sh"

# Start even if the runner already appears to be running
force = false

# Timing (seconds)
restart_delay = 1.0                               # Wait between stop and start on restart
stop_timeout = 0.0                                # Wait for exit before SIGKILL (0 = do not wait)
"""

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(sample_config)
