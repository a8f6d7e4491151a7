"""HTML Gantt timeline renderers (plain and Datadog-linked)."""

from timeline_tracing.links import logs_url, trace_url
from timeline_tracing.models import EventView, RenderOptions
from timeline_tracing.output import write_output
from timeline_tracing.templating import (
    DATADOG_TEMPLATE,
    TIMELINE_TEMPLATE,
    load_template,
    render_template,
)

# lead-in before the earliest slice so the first bar is not glued to the axis
ANCHOR_OFFSET_MS = 60_000


def minimal_timestamp(events: dict[str, EventView]) -> int | None:
    """Earliest slice begin minus the anchor offset; None if there is nothing to draw."""
    begins = [s.begin for event in events.values() for s in event.slices]
    if not begins:
        return None
    return min(begins) - ANCHOR_OFFSET_MS


def build_rows(
    events: dict[str, EventView], minimal_ts: int | None, datadog_site: str | None = None
) -> list[dict]:
    """Flatten events into one row per slice for the chart."""
    rows = []
    for event in events.values():
        for s in event.slices:
            row = {
                "id": event.id,
                "operation": s.operation,
                "tooltip": s.tooltip,
                "begin": s.begin,
                "end": s.end,
            }
            if datadog_site:
                row["trace_url"] = trace_url(event.id, datadog_site)
                row["logs_url"] = logs_url(event.id, minimal_ts, datadog_site)
            rows.append(row)
    return rows


def _render(template_name: str, events: dict[str, EventView], out_file: str,
            options: RenderOptions, datadog: bool) -> None:
    minimal_ts = minimal_timestamp(events)
    site = options.datadog_site if datadog else None
    template = load_template(template_name, options.template_file)
    content = render_template(
        template,
        events=events,
        rows=build_rows(events, minimal_ts, site),
        minimal_ts=minimal_ts,
        datadog_site=site,
    )
    write_output(content, out_file)


def render_html(events: dict[str, EventView], out_file: str, options: RenderOptions) -> None:
    _render(TIMELINE_TEMPLATE, events, out_file, options, datadog=False)


def render_html_datadog(events: dict[str, EventView], out_file: str, options: RenderOptions) -> None:
    _render(DATADOG_TEMPLATE, events, out_file, options, datadog=True)
