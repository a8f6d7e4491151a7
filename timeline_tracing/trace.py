"""Chrome Trace Event Format output, bare or wrapped in a Perfetto launcher page.

Each event gets its own synthetic thread id; every slice becomes a
Begin ("B") / End ("E") pair on that thread. Timestamps are microseconds.
"""

import json
import logging

from timeline_tracing.links import logs_url, trace_url
from timeline_tracing.models import EventView, RenderOptions
from timeline_tracing.output import write_output
from timeline_tracing.templating import PERFETTO_TEMPLATE, load_template, render_template

logger = logging.getLogger(__name__)

PHASE_BEGIN = "B"
PHASE_END = "E"


def order_events_by_start(events: dict[str, EventView]) -> list[EventView]:
    """Events sorted by their first slice begin; ties keep mapping order."""
    return sorted(events.values(), key=lambda event: event.first_begin)


def _trace_event(event: EventView, slice_view, phase: str, ts_ms: int, tid: int,
                 from_ts: int, site: str) -> dict:
    return {
        "name": slice_view.operation,
        "cat": "",
        "ph": phase,
        "ts": ts_ms * 1000,
        "pid": 0,
        "tid": tid,
        "args": {
            "name": slice_view.operation,
            "htmlTooltip": slice_view.tooltip,
            "trace_id": event.id,
            "trace_url": trace_url(event.id, site),
            "logs_url": logs_url(event.id, from_ts, site),
        },
    }


def build_trace_file(events: dict[str, EventView], site: str) -> dict:
    """Build the trace document for *events*."""
    ordered = order_events_by_start(events)
    trace_events = []
    if ordered:
        from_ts = ordered[0].first_begin
        for tid, event in enumerate(ordered, start=1):
            for s in event.slices:
                trace_events.append(_trace_event(event, s, PHASE_BEGIN, s.begin, tid, from_ts, site))
                trace_events.append(_trace_event(event, s, PHASE_END, s.end, tid, from_ts, site))
    logger.debug("Built %d trace events for %d traces", len(trace_events), len(ordered))
    return {
        "traceEvents": trace_events,
        "displayTimeUnit": "ms",
        "otherData": {},
    }


def render_trace_json(events: dict[str, EventView], out_file: str, options: RenderOptions) -> None:
    data = build_trace_file(events, options.datadog_site)
    write_output(json.dumps(data), out_file)


def render_trace_perfetto(events: dict[str, EventView], out_file: str, options: RenderOptions) -> None:
    data = build_trace_file(events, options.datadog_site)
    template = load_template(PERFETTO_TEMPLATE)
    write_output(render_template(template, trace=data), out_file)
