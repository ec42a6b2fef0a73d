from enum import Enum


class StopReason(Enum):
    """Why a run stopped. Only FATAL maps to a non-zero exit status."""
    TIMEOUT = "timeout"
    SIGNAL = "signal"
    FATAL = "fatal"
