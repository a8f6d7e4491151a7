"""Shared pytest fixtures for the timeline-tracing test suite."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

from timeline_tracing.reconstructor import ReconstructionSettings

TS_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
T0 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


def ts(offset_seconds: float = 0.0) -> str:
    """Timestamp string *offset_seconds* after T0, in TS_FORMAT."""
    return (T0 + timedelta(seconds=offset_seconds)).strftime(TS_FORMAT)


@pytest.fixture()
def settings() -> ReconstructionSettings:
    return ReconstructionSettings(
        field_id="trace_id",
        field_ts="ts",
        field_msg="msg",
        ts_format=TS_FORMAT,
        begin_regex="start",
        end_regex="end",
        operation_regex=r"op (\w+)",
        threshold="1s",
    )


@pytest.fixture()
def make_records():
    """Return a builder turning (id, offset_seconds, message) tuples into records."""

    def _build(*rows: tuple[str, float, str]) -> list[dict[str, str]]:
        return [
            {"trace_id": trace_id, "ts": ts(offset), "msg": msg}
            for trace_id, offset, msg in rows
        ]

    return _build


@pytest.fixture()
def sample_csv() -> str:
    return os.path.join(os.path.dirname(__file__), "data", "sample.csv")


@pytest.fixture()
def t0() -> datetime:
    """Timestamp of offset 0 in records built by ``make_records``."""
    return T0
