"""Error taxonomy for top-mem-util.

Config and I/O failures are fatal: the run stops and exits with status 1.
An external stop request is not an error, see utils.stop_reason.
"""


class TopMemError(RuntimeError):
    """Base class for all top-mem-util errors."""


class ConfigError(TopMemError):
    """Invalid interval, process count, timeout or log path."""


class SourceUnavailable(TopMemError):
    """The process enumeration facility failed."""


class WriteFailure(TopMemError):
    """The log file cannot be opened or written."""
