"""
ProcessSample and LogRecord are the per-tick data carried from the snapshot source to the log.
"""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Memory statistics of one process at capture time, sizes in kilobytes."""
    pid: int
    resident_kb: int
    nominal_size_kb: int
    virtual_kb: int
    command: str


@dataclass(slots=True, frozen=True)
class LogRecord:
    """One line of the log: a sample stamped with the epoch of its tick."""
    epoch: int
    sample: ProcessSample
