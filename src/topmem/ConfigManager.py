"""Parses command line values and the optional YAML config into a RunConfig."""

import logging
import os
import yaml

from topmem.models import RunConfig
from topmem.shared_data import (
    DEFAULT_INTERVAL_SEC,
    DEFAULT_LOG_PATH,
    DEFAULT_PROCESSES,
    DEFAULT_TIMEOUT_MIN,
    MAX_WAIT_SEC,
)
from topmem.utils.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_KEYS = ("file", "interval", "processes", "timeout")


class ConfigManager:
    """Merges defaults, the YAML config file and command line values (in that
    order of precedence, lowest first), validates them and builds the
    immutable RunConfig for the run."""

    def __init__(self, file=None, interval=None, processes=None, timeout=None, config_path=None):
        """Raises ConfigError if any value or the log path is invalid."""
        values = {
            "file": DEFAULT_LOG_PATH,
            "interval": DEFAULT_INTERVAL_SEC,
            "processes": DEFAULT_PROCESSES,
            "timeout": DEFAULT_TIMEOUT_MIN,
        }
        if config_path is not None:
            values.update(self._load_yaml(config_path))
        overrides = {"file": file, "interval": interval, "processes": processes, "timeout": timeout}
        values.update({k: v for k, v in overrides.items() if v is not None})

        interval_sec = self._parse_int("interval", values["interval"], minimum=1)
        timeout_minutes = self._parse_int("timeout", values["timeout"], minimum=0)
        # both end up as waits on threading primitives
        self._check_wait("interval", interval_sec, interval_sec)
        self._check_wait("timeout", timeout_minutes, timeout_minutes * 60)

        self.data = RunConfig(
            log_path=self._validate_log_path(values["file"]),
            interval_sec=interval_sec,
            processes=self._parse_int("processes", values["processes"], minimum=1),
            timeout_minutes=timeout_minutes,
        )
        if __debug__:
            logger.debug("Loaded config object: %s", self.data)

    @classmethod
    def from_args(cls, args):
        """Build from an argparse namespace."""
        return cls(
            file=args.file,
            interval=args.interval,
            processes=args.processes,
            timeout=args.timeout,
            config_path=args.config,
        )

    def _load_yaml(self, config_path: str) -> dict:
        """Load the YAML config file; only the known keys are accepted."""
        if __debug__:
            logger.info("Loading configuration from: %s", config_path)
        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file)
        except FileNotFoundError as exc:
            raise ConfigError(f"Config file not found: {config_path}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        unknown = set(data) - set(CONFIG_KEYS)
        if unknown:
            raise ConfigError(f"Unknown keys in config file {config_path}: {', '.join(sorted(unknown))}")
        return {k: v for k, v in data.items() if v is not None}

    def _parse_int(self, name: str, value, minimum: int) -> int:
        """Accept an int or a string of decimal digits, no sign or fraction."""
        if isinstance(value, bool):
            raise ConfigError(f"Invalid {name} value: {value!r}")
        if isinstance(value, int):
            number = value
        else:
            text = str(value).strip()
            if not (text.isascii() and text.isdigit()):
                raise ConfigError(f"Invalid {name} value: {value!r}, expected a whole number")
            number = int(text)
        if number < minimum:
            raise ConfigError(f"Invalid {name} value: {value!r}, must be at least {minimum}")
        return number

    def _check_wait(self, name: str, value: int, seconds: int) -> None:
        """Reject waits longer than threading can schedule."""
        if seconds > MAX_WAIT_SEC:
            raise ConfigError(f"Invalid {name} value: {value!r}, too large")

    def _validate_log_path(self, path) -> str:
        """The log path must not be a directory and must be writable or creatable.

        Nothing is created here, the file is only opened once the run starts.
        """
        if not isinstance(path, str) or not path.strip():
            raise ConfigError(f"Invalid log file path: {path!r}")
        path = os.path.abspath(os.path.expanduser(path))
        if os.path.isdir(path):
            raise ConfigError(f"Log file path {path} is a directory")
        if os.path.exists(path):
            if not os.access(path, os.W_OK):
                raise ConfigError(f"Log file {path} is not writable")
            return path
        parent = os.path.dirname(path)
        if not os.path.isdir(parent):
            raise ConfigError(f"Directory {parent} for log file does not exist")
        if not os.access(parent, os.W_OK | os.X_OK):
            raise ConfigError(f"Cannot create log file in {parent}")
        return path
