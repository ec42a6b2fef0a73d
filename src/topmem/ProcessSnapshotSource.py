"""Process Snapshot Source enumerates live processes with their memory usage through psutil."""

import logging
import psutil

from topmem.models import ProcessSample
from topmem.shared_data import KB
from topmem.utils.errors import SourceUnavailable

logger = logging.getLogger(__name__)

PROCESS_ATTRS = ["pid", "name", "cmdline", "memory_info"]


class ProcessSnapshotSource:
    """Takes one snapshot of the process table per call.

    Sizes are reported in kilobytes like ps(1) prints them: resident set size,
    data+stack size and virtual size. The command line is kept verbatim.
    """

    def __init__(self):
        if __debug__:
            self.captures = 0
            self.skipped = 0

    def capture(self) -> list[ProcessSample]:
        """Return one ProcessSample per visible process, in the order psutil yields them."""
        snapshot = []
        try:
            for proc in psutil.process_iter(PROCESS_ATTRS, ad_value=None):
                sample = self._to_sample(proc.info)
                if sample is None:
                    if __debug__:
                        self.skipped += 1
                    continue
                snapshot.append(sample)
        except (psutil.Error, OSError) as exc:
            logger.error("Process enumeration failed: %s", exc)
            raise SourceUnavailable(f"Cannot enumerate processes: {exc}") from exc

        if __debug__:
            self.captures += 1
            logger.debug("Captured %d processes (%d skipped so far)", len(snapshot), self.skipped)
        return snapshot

    def _to_sample(self, info: dict):
        """Build a sample from the psutil info dict, None if the pid is unknown."""
        pid = info.get("pid")
        if pid is None:
            return None
        mem = info.get("memory_info")
        if mem is None:
            # access denied for memory, still list the process like ps does
            resident_kb = nominal_kb = virtual_kb = 0
        else:
            resident_kb = mem.rss // KB
            # "data" (data + stack) is the SIZE column of ps; not reported on every platform
            nominal_kb = getattr(mem, "data", 0) // KB
            virtual_kb = mem.vms // KB
        return ProcessSample(
            pid=int(pid),
            resident_kb=int(resident_kb),
            nominal_size_kb=int(nominal_kb),
            virtual_kb=int(virtual_kb),
            command=self._command(info),
        )

    @staticmethod
    def _command(info: dict) -> str:
        cmdline = info.get("cmdline")
        if cmdline:
            # a newline inside an argument would split the record, ps prints such bytes as ?
            return " ".join(cmdline).replace("\n", "?").replace("\r", "?")
        # kernel threads and zombies have no argv, ps shows them as [name]
        return f"[{info.get('name') or '?'}]"
