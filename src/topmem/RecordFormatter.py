"""Converts samples to log lines and back.

Line format: <epoch> <resident_kb> <nominal_size_kb> <virtual_kb> <pid> <command>
The command is last and unescaped; everything after the fifth space belongs to it.
"""

from topmem.models import LogRecord, ProcessSample
from topmem.shared_data import NUMERIC_FIELD_COUNT


class RecordFormatter:
    """Formats one log line per sample. Stateless."""

    def format(self, epoch: int, sample: ProcessSample) -> str:
        return (
            f"{epoch} {sample.resident_kb} {sample.nominal_size_kb} "
            f"{sample.virtual_kb} {sample.pid} {sample.command}"
        )

    def parse(self, line: str) -> LogRecord:
        """Split a log line on its first five spaces and rebuild the record."""
        parts = line.split(" ", NUMERIC_FIELD_COUNT)
        if len(parts) != NUMERIC_FIELD_COUNT + 1:
            raise ValueError(f"Malformed log line: {line!r}")
        try:
            epoch, resident_kb, nominal_kb, virtual_kb, pid = (int(p) for p in parts[:NUMERIC_FIELD_COUNT])
        except ValueError as exc:
            raise ValueError(f"Malformed log line: {line!r}") from exc
        return LogRecord(
            epoch=epoch,
            sample=ProcessSample(
                pid=pid,
                resident_kb=resident_kb,
                nominal_size_kb=nominal_kb,
                virtual_kb=virtual_kb,
                command=parts[NUMERIC_FIELD_COUNT],
            ),
        )
