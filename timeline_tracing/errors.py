"""Exceptions raised by the timeline pipeline.

Library code raises these; only the CLI entry point turns them into a
logged error and a non-zero exit status.
"""


class TimelineError(Exception):
    """Base class for every fatal pipeline error."""


class ConfigError(TimelineError):
    """Raised when settings are missing or the YAML config is invalid."""


class CsvFormatError(TimelineError):
    """Raised when the input cannot be read as CSV."""


class MissingFieldError(CsvFormatError):
    """Raised when a configured column is absent from the CSV header."""


class TimestampParseError(TimelineError):
    """Raised when a row carries an illegal timestamp."""

    def __init__(self, row_number: int, value: str, fmt: str):
        self.row_number = row_number
        self.value = value
        self.fmt = fmt
        super().__init__(
            f"Illegal timestamp in row {row_number}: {value!r} does not match format {fmt!r}"
        )


class DurationParseError(TimelineError):
    """Raised when a threshold duration string cannot be parsed."""


class PatternError(TimelineError):
    """Raised when a begin/end/operation regex does not compile."""


class UnknownFormatError(TimelineError):
    """Raised when an output format name is not registered."""


class RenderError(TimelineError):
    """Raised when a template or the output file cannot be processed."""
