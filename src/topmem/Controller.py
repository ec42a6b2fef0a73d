"""Lifecycle controller for a top-mem-util run.

Responsible for opening the log sink, printing the run summary, bounding the
run with the optional timeout, reacting to termination signals and reporting
the exit status.
"""

import logging
import signal
import sys
import threading
from functools import partial

from topmem.CompressedAppender import CompressedAppender
from topmem.SampleLoop import SampleLoop
from topmem.models import RunConfig
from topmem.shared_data import EXIT_FAILURE, EXIT_OK
from topmem.utils.errors import SourceUnavailable, WriteFailure
from topmem.utils.stop_reason import StopReason

logger = logging.getLogger(__name__)


class Controller:
    """Owns the RunConfig, the stop flag, the timeout timer and the log sink."""

    def __init__(self, config: RunConfig, source=None, clock=None):
        """The source and clock are passed through to the SampleLoop."""
        if __debug__:
            logger.info("Initializing Controller for log file: %s", config.log_path)
        self.config = config
        self.stop_event = threading.Event()
        self.stop_reason = None
        self.timer = None
        self.appender = CompressedAppender(config.log_path)
        loop_kwargs = {}
        if source is not None:
            loop_kwargs["source"] = source
        if clock is not None:
            loop_kwargs["clock"] = clock
        self.sample_loop = SampleLoop(config, self.appender, **loop_kwargs)

    def stop(self, reason: StopReason = StopReason.SIGNAL) -> None:
        """Request a cooperative stop; the in-flight tick finishes its append."""
        if self.stop_reason is None:
            self.stop_reason = reason
        self.stop_event.set()

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to stop(). Must be called from the main thread."""
        signal.signal(signal.SIGTERM, partial(handle_signal, self))
        signal.signal(signal.SIGINT, partial(handle_signal, self))

    def summary(self) -> str:
        timeout = (f"{self.config.timeout_minutes} minute(s)"
                   if self.config.timeout_minutes else "none (until interrupted)")
        return (
            f"Logging top {self.config.processes} processes by resident memory\n"
            f"  log file: {self.config.log_path}\n"
            f"  interval: {self.config.interval_sec} second(s)\n"
            f"  timeout:  {timeout}"
        )

    def _start_timer(self) -> None:
        if self.config.timeout_sec <= 0:
            return
        self.timer = threading.Timer(self.config.timeout_sec, self.stop, args=(StopReason.TIMEOUT,))
        self.timer.name = "TimeoutTimer"
        self.timer.daemon = True
        self.timer.start()

    def run(self) -> int:
        """Run until timeout, signal or fatal error and return the exit status."""
        status = EXIT_FAILURE
        try:
            self.appender.open()
            print(self.summary(), flush=True)
            self._start_timer()
            self.sample_loop.run(self.stop_event)
            status = EXIT_OK
        except (SourceUnavailable, WriteFailure) as e:
            self.stop_reason = StopReason.FATAL
            logger.error("Fatal error, stopping: %s", e)
            print(f"top-mem-util: {e}", file=sys.stderr)
        finally:
            self._shutdown(status)
        return status

    def _shutdown(self, status: int) -> None:
        """Always runs: cancel the timer, close the sink, report how the run ended."""
        if self.timer is not None:
            self.timer.cancel()
        self.appender.close()
        reason = self.stop_reason.value if self.stop_reason else "unknown"
        logger.info("top-mem-util exited with status %d (%s) after %d ticks",
                    status, reason, self.sample_loop.ticks)


def handle_signal(controller, signum, frame):
    """Handle termination signals to gracefully shut down the controller."""
    if __debug__:
        logger.info("Received signal %d, shutting down...", signum)
    controller.stop(StopReason.SIGNAL)
