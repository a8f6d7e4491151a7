"""Output format registry."""

from typing import Callable

from timeline_tracing.errors import UnknownFormatError
from timeline_tracing.html_view import render_html, render_html_datadog
from timeline_tracing.models import EventView, RenderOptions
from timeline_tracing.trace import render_trace_json, render_trace_perfetto

Renderer = Callable[[dict[str, EventView], str, RenderOptions], None]

FORMAT_HTML = "html"
FORMAT_HTML_DATADOG = "html-datadog"
FORMAT_TRACE_JSON = "trace-json"
FORMAT_TRACE_PERFETTO = "trace-perfetto"

RENDERERS: dict[str, Renderer] = {
    FORMAT_HTML: render_html,
    FORMAT_HTML_DATADOG: render_html_datadog,
    FORMAT_TRACE_JSON: render_trace_json,
    FORMAT_TRACE_PERFETTO: render_trace_perfetto,
}

VALID_FORMATS = tuple(RENDERERS)


def get_renderer(format_name: str) -> Renderer:
    """Return the renderer for *format_name*."""
    try:
        return RENDERERS[format_name]
    except KeyError:
        raise UnknownFormatError(
            f"Unknown format: {format_name!r} (expected one of {', '.join(VALID_FORMATS)})"
        ) from None
