"""top-mem-util: periodically logs the top memory consuming processes to an xz log."""

__version__ = "1.0.0"
