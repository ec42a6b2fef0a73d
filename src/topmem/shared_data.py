"""Constants shared between multiple top-mem-util components."""

import os
import threading

DEFAULT_LOG_NAME = "top-mem-util.log.xz"
DEFAULT_LOG_PATH = os.path.join(".", DEFAULT_LOG_NAME)
DEFAULT_INTERVAL_SEC = 10
DEFAULT_PROCESSES = 20
DEFAULT_TIMEOUT_MIN = 0  # 0 means run until stopped

KB = 1024

# Field order of a log line; command is always last and may contain spaces
RECORD_FIELDS = ("epoch", "resident_kb", "nominal_size_kb", "virtual_kb", "pid", "command")
NUMERIC_FIELD_COUNT = len(RECORD_FIELDS) - 1

EXIT_OK = 0
EXIT_FAILURE = 1

LOG_LEVEL_ENV = "TOPMEM_LOG_LEVEL"

# Log tick metrics every N ticks
METRICS_EVERY_TICKS = 10

# Longest interval or timeout accepted; half of TIMEOUT_MAX leaves headroom
# for the monotonic clock deadline computed by lock acquires
MAX_WAIT_SEC = int(threading.TIMEOUT_MAX) // 2
