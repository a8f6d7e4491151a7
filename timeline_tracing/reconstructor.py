"""Event reconstruction — pair begin/end marker rows per identifier.

A single chronological pass over the records:
  1. every timestamp is parsed up front (first failure is fatal)
  2. records are stable-sorted by timestamp, ties keep input order
  3. a begin marker opens a new slice on the identifier's event and adds the
     identifier to the ongoing set
  4. an end marker closes the event's most recent slice and removes the
     identifier from the ongoing set

The ongoing set is copied whenever it grows past its previous maximum; the
last copy is the "extreme" snapshot used by extreme-mode selection.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Sequence

from timeline_tracing.errors import PatternError, TimestampParseError
from timeline_tracing.models import Event, Reconstruction, Slice
from timeline_tracing.timeparse import parse_duration, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconstructionSettings:
    field_id: str
    field_ts: str
    field_msg: str
    ts_format: str
    begin_regex: str
    end_regex: str
    operation_regex: str = ""
    threshold: str = "1s"


def _compile(pattern: str, name: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(f"Invalid {name} {pattern!r}: {e}") from e


def _has_match(pattern: re.Pattern, text: str) -> bool:
    """True if *pattern* finds a non-empty match somewhere in *text*."""
    match = pattern.search(text)
    return bool(match and match.group(0))


def normalize_id(raw: str) -> str:
    return raw.replace('"', "")


def extract_operation(pattern: re.Pattern | None, message: str) -> str:
    """Return the single capture group of *pattern* in *message*, or ""."""
    if pattern is None:
        return ""
    match = pattern.search(message)
    if match is None:
        logger.debug("Operation pattern did not match %r", message)
        return ""
    groups = match.groups()
    if len(groups) != 1:
        logger.warning("Unexpected matches in string %r: %r", message, groups)
        return ""
    return groups[0] or ""


def parse_all_timestamps(
    records: Sequence[Mapping[str, str]], field_ts: str, ts_format: str
) -> list[datetime]:
    """Parse every record's timestamp, failing on the first illegal one."""
    parsed = []
    for row_number, record in enumerate(records, start=1):
        value = record[field_ts]
        try:
            parsed.append(parse_timestamp(value, ts_format))
        except ValueError as e:
            raise TimestampParseError(row_number, value, ts_format) from e
    return parsed


def sort_chronologically(
    records: Sequence[Mapping[str, str]], timestamps: Sequence[datetime]
) -> list[tuple[datetime, Mapping[str, str]]]:
    """Pair records with their timestamps, ordered by time (stable)."""
    return sorted(zip(timestamps, records), key=lambda pair: pair[0])


def reconstruct(
    records: Sequence[Mapping[str, str]], settings: ReconstructionSettings
) -> Reconstruction:
    """Build identifier -> Event from the records in one chronological pass."""
    begin_re = _compile(settings.begin_regex, "begin regex")
    end_re = _compile(settings.end_regex, "end regex")
    operation_re = (
        _compile(settings.operation_regex, "operation regex")
        if settings.operation_regex
        else None
    )
    threshold = parse_duration(settings.threshold)

    timestamps = parse_all_timestamps(records, settings.field_ts, settings.ts_format)

    events: dict[str, Event] = {}
    ongoing: set[str] = set()
    extreme: set[str] = set()

    for ts, record in sort_chronologically(records, timestamps):
        event_id = normalize_id(record[settings.field_id])
        if not event_id:
            continue
        message = record[settings.field_msg]
        event = events.setdefault(event_id, Event(id=event_id))

        if _has_match(begin_re, message):
            ongoing.add(event_id)
            if len(ongoing) > len(extreme):
                extreme = set(ongoing)
            event.slices.append(
                Slice(begin=ts, operation=extract_operation(operation_re, message))
            )
        elif _has_match(end_re, message):
            ongoing.discard(event_id)
            if not event.slices:
                logger.warning("Event without slices encountered for ID %s", event_id)
            else:
                event.slices[-1].end = ts

    logger.debug("Reconstructed %d events from %d rows", len(events), len(records))
    return Reconstruction(
        events=events,
        extreme_snapshot=frozenset(extreme),
        threshold=threshold,
    )
