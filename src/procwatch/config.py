# src/procwatch/config.py
"""Configuration loading and validation using Pydantic."""

from pathlib import Path
from typing import Any, Literal, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import paths
from .errors import ConfigError

DEFAULT_RESTART_DELAY_MS = 1000


def _expand_optional_path(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, (str, Path)):
        return paths.expand_path(value)
    return value


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(populate_by_name=True)

    level: str = "INFO"
    json_format: bool = Field(False, alias="json")


class FileConfig(BaseModel):
    """Schema of the optional procwatch.yaml file."""
    version: Literal[1] = 1
    restart_delay_ms: int = Field(DEFAULT_RESTART_DELAY_MS, ge=0)
    stdin: Optional[Path] = None
    stdout: Optional[Path] = None
    stderr: Optional[Path] = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("stdin", "stdout", "stderr", mode="before")
    @classmethod
    def expand_stream_paths(cls, value: Any) -> Any:
        return _expand_optional_path(value)


class SupervisionConfig(BaseModel):
    """
    Everything the supervision loop needs to launch the child.

    Built once at startup and never mutated.
    """
    model_config = ConfigDict(frozen=True)

    executable: str = Field(min_length=1)
    args: Tuple[str, ...] = ()
    restart_delay_ms: int = Field(DEFAULT_RESTART_DELAY_MS, ge=0)
    stdin: Optional[Path] = None
    stdout: Optional[Path] = None
    stderr: Optional[Path] = None

    @field_validator("stdin", "stdout", "stderr", mode="before")
    @classmethod
    def expand_stream_paths(cls, value: Any) -> Any:
        return _expand_optional_path(value)

    @property
    def restart_delay(self) -> float:
        """Restart delay in seconds."""
        return self.restart_delay_ms / 1000.0

    @property
    def command(self) -> list[str]:
        return [self.executable, *self.args]


def load_config(path: Optional[Path] = None) -> FileConfig:
    """
    Load, parse, and validate the procwatch configuration file.

    An explicitly given path must exist. When no path is given the default
    location is tried and silently skipped if nothing is there.

    Raises:
        ConfigError: If the file is missing, unreadable, or fails validation.
    """
    if path is None:
        config_path = paths.get_default_config_path()
        if not config_path.is_file():
            return FileConfig()
    else:
        config_path = paths.expand_path(path)
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found at '{config_path}'.")

    try:
        data = yaml.safe_load(config_path.read_bytes()) or {}
        return FileConfig.model_validate(data)
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse configuration file '{config_path}': {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed:\n{e}") from e


def build_supervision_config(
    executable: str,
    args: Sequence[str] = (),
    file_config: Optional[FileConfig] = None,
    delay_ms: Optional[int] = None,
    stdin: Optional[Path] = None,
    stdout: Optional[Path] = None,
    stderr: Optional[Path] = None,
) -> SupervisionConfig:
    """Merge command-line values over the file configuration."""
    base = file_config or FileConfig()
    try:
        return SupervisionConfig(
            executable=executable,
            args=tuple(args),
            restart_delay_ms=base.restart_delay_ms if delay_ms is None else delay_ms,
            stdin=stdin if stdin is not None else base.stdin,
            stdout=stdout if stdout is not None else base.stdout,
            stderr=stderr if stderr is not None else base.stderr,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid supervision settings:\n{e}") from e
