"""Timestamp and duration parsing.

Timestamp formats come in three flavours:
  1. ``strftime`` directives, e.g. ``%Y-%m-%d %H:%M:%S.%f`` (anything containing ``%``)
  2. ``iso`` for ISO 8601 / RFC 3339 values
  3. Go reference layouts, e.g. ``2006-01-02T15:04:05.000Z07:00``

Values without zone information are taken as UTC. A zone abbreviation
matched by a Go ``MST`` token (``PST``, ``CEST``, ...) carries no offset and
is taken as UTC as well.
"""

import re
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from timeline_tracing.errors import DurationParseError

ISO_FORMAT = "iso"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

# Longest tokens first so "2006" wins over "2" and "Jan" over "J".
_GO_TOKENS = sorted(
    [
        ("January", "%B"), ("Jan", "%b"),
        ("Monday", "%A"), ("Mon", "%a"),
        ("MST", "%Z"),
        ("2006", "%Y"), ("06", "%y"),
        ("01", "%m"), ("1", "%m"),
        ("002", "%j"), ("02", "%d"), ("_2", "%d"), ("2", "%d"),
        ("15", "%H"), ("03", "%I"), ("3", "%I"),
        ("04", "%M"), ("4", "%M"),
        ("05", "%S"), ("5", "%S"),
        ("PM", "%p"), ("pm", "%p"),
        ("Z07:00", "%z"), ("Z0700", "%z"), ("Z07", "%z"),
        ("-07:00", "%z"), ("-0700", "%z"), ("-07", "%z"),
    ],
    key=lambda pair: len(pair[0]),
    reverse=True,
)

_ZONE_ABBREVIATION = re.compile(r"\b[A-Z]{3,5}\b")

_GO_FRACTION = re.compile(r"[.,](0+|9+)(?!\d)")

_DURATION_RE = re.compile(r"[-+]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
# unit -> microseconds
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}


@lru_cache(maxsize=32)
def go_layout_to_strptime(layout: str) -> tuple[str, ...]:
    """Translate a Go reference layout into candidate strptime formats.

    Go treats a ``.999`` fraction as optional, so such layouts yield two
    candidates: with and without the fractional part.
    """
    with_fraction = []
    without_fraction = []
    optional_fraction = False
    i = 0
    while i < len(layout):
        frac = _GO_FRACTION.match(layout, i)
        if frac:
            with_fraction.append(layout[i] + "%f")
            optional_fraction = optional_fraction or frac.group(1).startswith("9")
            i = frac.end()
            continue
        for token, directive in _GO_TOKENS:
            if layout.startswith(token, i):
                with_fraction.append(directive)
                without_fraction.append(directive)
                i += len(token)
                break
        else:
            literal = "%%" if layout[i] == "%" else layout[i]
            with_fraction.append(literal)
            without_fraction.append(literal)
            i += 1

    if optional_fraction:
        return "".join(with_fraction), "".join(without_fraction)
    return ("".join(with_fraction),)


def _strptime_candidates(fmt: str) -> tuple[str, ...]:
    if "%" in fmt:
        return (fmt,)
    return go_layout_to_strptime(fmt)


def parse_timestamp(value: str, fmt: str) -> datetime:
    """Parse *value* with *fmt* and return a timezone-aware datetime.

    Raises ValueError if the value does not match the format.
    """
    value = value.strip()
    if fmt.lower() == ISO_FORMAT:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        if "%" not in fmt and "MST" in fmt:
            # strptime's %Z only knows UTC, GMT and the local zone names
            value = _ZONE_ABBREVIATION.sub("UTC", value, count=1)
        parsed = None
        for candidate in _strptime_candidates(fmt):
            try:
                parsed = datetime.strptime(value, candidate)
                break
            except ValueError:
                continue
        if parsed is None:
            raise ValueError(f"{value!r} does not match {fmt!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration such as ``1s``, ``1m30s``, ``250ms`` or ``0``."""
    raw = text.strip()
    if raw in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION_RE.fullmatch(raw):
        raise DurationParseError(f"Illegal threshold provided: {text!r}")

    micros = sum(float(number) * _DURATION_UNITS[unit]
                 for number, unit in _DURATION_PART.findall(raw))
    total = timedelta(microseconds=micros)
    return -total if raw.startswith("-") else total


def to_epoch_ms(moment: datetime) -> int:
    return (moment - EPOCH) // _ONE_MS


def format_time_of_day(moment: datetime) -> str:
    """HH:MM:SS with milliseconds, trailing zeros of the fraction trimmed."""
    text = moment.strftime("%H:%M:%S")
    millis = moment.microsecond // 1000
    if millis:
        text += "." + f"{millis:03d}".rstrip("0")
    return text


def format_seconds(duration: timedelta) -> str:
    """Render a duration as seconds with millisecond precision, sign kept."""
    millis = duration // _ONE_MS
    sign = "-" if millis < 0 else ""
    millis = abs(millis)
    return f"{sign}{millis // 1000}.{millis % 1000:03d}"
