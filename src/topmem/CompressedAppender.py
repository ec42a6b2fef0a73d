"""Compressed Appender owns the log file and appends one xz stream per batch."""

import logging
import lzma
import os

from topmem.utils.errors import WriteFailure

logger = logging.getLogger(__name__)


class CompressedAppender:
    """Appends batches of lines to the log as independent xz streams.

    The file is opened once in append mode and kept open for the whole run.
    Existing bytes are never rewritten; a reader decompressing the file from
    the start recovers every batch in the order it was appended.
    """

    def __init__(self, log_path: str):
        self.log_path = log_path
        self._file = None
        if __debug__:
            self.batches_written = 0
            self.bytes_written = 0

    def open(self) -> "CompressedAppender":
        if self._file is not None:
            return self
        try:
            # unbuffered, so a failed write leaves nothing pending to be flushed on close
            self._file = open(self.log_path, "ab", buffering=0)
        except OSError as exc:
            logger.error("Cannot open log file %s: %s", self.log_path, exc)
            raise WriteFailure(f"Cannot open log file {self.log_path}: {exc}") from exc
        if __debug__:
            logger.info("Opened log file %s at offset %d", self.log_path, self._file.tell())
        return self

    def append_batch(self, lines: list[str]) -> int:
        """Compress the lines as one xz stream and append it. Returns the compressed size."""
        if self._file is None:
            raise WriteFailure(f"Log file {self.log_path} is not open")
        text = "".join(f"{line}\n" for line in lines)
        chunk = lzma.compress(text.encode("utf-8", errors="surrogateescape"), format=lzma.FORMAT_XZ)
        start = self._file.tell()
        try:
            view = memoryview(chunk)
            while view:
                written = self._file.write(view)
                view = view[written:]
            os.fsync(self._file.fileno())
        except OSError as exc:
            logger.error("Cannot write to log file %s: %s", self.log_path, exc)
            self._discard_partial(start)
            raise WriteFailure(f"Cannot write to log file {self.log_path}: {exc}") from exc
        if __debug__:
            self.batches_written += 1
            self.bytes_written += len(chunk)
            logger.debug("Appended %d lines as %d compressed bytes", len(lines), len(chunk))
        return len(chunk)

    def _discard_partial(self, start: int) -> None:
        """Cut a partially written stream off the end so earlier chunks stay decodable."""
        try:
            os.ftruncate(self._file.fileno(), start)
        except OSError as exc:
            logger.error("Cannot remove partial chunk from %s at offset %d: %s", self.log_path, start, exc)

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        finally:
            self._file = None
        if __debug__:
            logger.info("Closed log file %s after %d batches (%d bytes)",
                        self.log_path, self.batches_written, self.bytes_written)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def read_lines(log_path: str) -> list[str]:
    """Decompress every stream in the log, in append order, and return its lines."""
    with open(log_path, "rb") as f:
        data = f.read()
    if not data:
        return []
    text = lzma.decompress(data, format=lzma.FORMAT_XZ).decode("utf-8", errors="surrogateescape")
    lines = text.split("\n")
    # every line is newline terminated, so the final split element is empty
    if lines[-1] == "":
        lines.pop()
    return lines
