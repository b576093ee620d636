"""Exceptions raised by easylogger."""


class CompressionError(Exception):
    """Raised when a retired log file cannot be gzipped."""
