"""Top level configuration for a top-mem-util run."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Validated once at start and immutable for the lifetime of the run."""
    log_path: str
    interval_sec: int
    processes: int
    timeout_minutes: int = 0  # 0 means unbounded

    @property
    def timeout_sec(self) -> int:
        return self.timeout_minutes * 60
