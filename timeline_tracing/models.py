"""Data model for reconstructed events and their render-ready views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass
class Slice:
    """One begin -> end interval; ``end`` stays None until an end marker arrives."""

    begin: datetime | None = None
    end: datetime | None = None
    operation: str = ""

    @property
    def is_complete(self) -> bool:
        return self.begin is not None and self.end is not None

    @property
    def duration(self) -> timedelta | None:
        if not self.is_complete:
            return None
        return self.end - self.begin


@dataclass
class Event:
    id: str
    slices: list[Slice] = field(default_factory=list)


@dataclass
class Reconstruction:
    """Outcome of a single chronological pass over the records."""

    events: dict[str, Event]
    extreme_snapshot: frozenset[str]
    threshold: timedelta

    @property
    def peak_concurrency(self) -> int:
        return len(self.extreme_snapshot)


@dataclass(frozen=True)
class SliceView:
    operation: str
    tooltip: str
    begin: int  # ms since epoch
    end: int  # ms since epoch

    @property
    def duration_ms(self) -> int:
        return self.end - self.begin


@dataclass(frozen=True)
class EventView:
    id: str
    slices: tuple[SliceView, ...]

    @property
    def first_begin(self) -> int:
        return self.slices[0].begin


@dataclass(frozen=True)
class RenderOptions:
    datadog_site: str = "app.datadoghq.com"
    template_file: str | None = None
