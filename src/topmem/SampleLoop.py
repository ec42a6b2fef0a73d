"""Sample Loop runs the capture, select, format and append cycle once per interval."""

import logging
import threading
import time

from topmem.CompressedAppender import CompressedAppender
from topmem.ProcessSnapshotSource import ProcessSnapshotSource
from topmem.RecordFormatter import RecordFormatter
from topmem.TopNSelector import TopNSelector
from topmem.models import RunConfig
from topmem.shared_data import METRICS_EVERY_TICKS

logger = logging.getLogger(__name__)


class SampleLoop:
    """Strictly sequential: a tick's append completes before the next capture starts.

    One tick captures the timestamp once, snapshots the process table, keeps the
    top N by resident memory, formats one line per process and hands the batch
    to the appender. Stop requests are honoured between ticks only.
    """

    def __init__(self, config: RunConfig, appender: CompressedAppender,
                 source: ProcessSnapshotSource = None, selector: TopNSelector = None,
                 formatter: RecordFormatter = None, clock=time.time):
        self.config = config
        self.appender = appender
        self.source = source if source is not None else ProcessSnapshotSource()
        self.selector = selector if selector is not None else TopNSelector()
        self.formatter = formatter if formatter is not None else RecordFormatter()
        self.clock = clock
        self.ticks = 0
        if __debug__:
            self.lines_written = 0
            self.start_time = time.time()

    def tick(self) -> int:
        """Run one tick and return the number of lines appended."""
        epoch = int(self.clock())
        snapshot = self.source.capture()
        selected = self.selector.select(snapshot, self.config.processes)
        lines = [self.formatter.format(epoch, sample) for sample in selected]
        self.appender.append_batch(lines)
        self.ticks += 1

        if __debug__:
            self.lines_written += len(lines)
            logger.debug("Tick %d at %d: %d of %d processes logged",
                         self.ticks, epoch, len(lines), len(snapshot))
            if self.ticks % METRICS_EVERY_TICKS == 0:
                runtime = time.time() - self.start_time
                logger.info("SampleLoop metrics: ticks=%d, lines=%d, runtime=%.1fs",
                            self.ticks, self.lines_written, runtime)
        return len(lines)

    def run(self, stop_event: threading.Event, max_ticks: int = None) -> int:
        """Tick until stop_event is set (or max_ticks reached). Returns the ticks run.

        SourceUnavailable and WriteFailure propagate to the caller.
        """
        if __debug__:
            logger.info("SampleLoop started: interval=%ds, processes=%d",
                        self.config.interval_sec, self.config.processes)
        ran = 0
        while not stop_event.is_set():
            self.tick()
            ran += 1
            if max_ticks is not None and ran >= max_ticks:
                break
            # the only suspension point between ticks, wakes early on stop
            if stop_event.wait(self.config.interval_sec):
                break
        if __debug__:
            logger.info("SampleLoop stopped after %d ticks", ran)
        return ran
