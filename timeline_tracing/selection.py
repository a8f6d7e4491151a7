"""Selection strategies — reduce reconstructed events to a render-ready subset."""

from datetime import timedelta
from typing import Callable, Iterable, Protocol, runtime_checkable

from timeline_tracing.models import Event, EventView, Reconstruction, Slice, SliceView
from timeline_tracing.timeparse import format_seconds, format_time_of_day, to_epoch_ms

TOOLTIP_TEMPLATE = "<b>Duration</b>: {seconds} sec<br /><b>Time</b>: {begin} ... {end}"


@runtime_checkable
class SelectionStrategy(Protocol):
    def select(self, reconstruction: Reconstruction) -> dict[str, EventView]: ...


def make_tooltip(slice_: Slice) -> str:
    return TOOLTIP_TEMPLATE.format(
        seconds=format_seconds(slice_.duration),
        begin=format_time_of_day(slice_.begin),
        end=format_time_of_day(slice_.end),
    )


def to_slice_view(slice_: Slice) -> SliceView:
    """Render-ready view of a complete slice."""
    return SliceView(
        operation=slice_.operation,
        tooltip=make_tooltip(slice_),
        begin=to_epoch_ms(slice_.begin),
        end=to_epoch_ms(slice_.end),
    )


def _collect(
    events: Iterable[Event], keep: Callable[[Event, Slice], bool]
) -> dict[str, EventView]:
    """Build views from complete slices accepted by *keep*; drop empty events."""
    views = {}
    for event in events:
        slices = tuple(
            to_slice_view(s) for s in event.slices
            if s.is_complete and keep(event, s)
        )
        if slices:
            views[event.id] = EventView(id=event.id, slices=slices)
    return views


class ThresholdSelection:
    """Keep slices lasting at least ``threshold`` (inclusive)."""

    def __init__(self, threshold: timedelta):
        self.threshold = threshold

    def select(self, reconstruction: Reconstruction) -> dict[str, EventView]:
        return _collect(
            reconstruction.events.values(),
            lambda event, s: s.duration >= self.threshold,
        )


class ExtremeSelection:
    """Keep complete slices of the events ongoing at the peak-concurrency moment.

    The threshold is ignored in this mode.
    """

    def __init__(self, snapshot: Iterable[str]):
        self.snapshot = frozenset(snapshot)

    def select(self, reconstruction: Reconstruction) -> dict[str, EventView]:
        return _collect(
            reconstruction.events.values(),
            lambda event, s: event.id in self.snapshot,
        )


def get_strategy(only_extreme: bool, reconstruction: Reconstruction) -> SelectionStrategy:
    """Factory that returns the right strategy for the configured mode."""
    if only_extreme:
        return ExtremeSelection(reconstruction.extreme_snapshot)
    return ThresholdSelection(reconstruction.threshold)
