"""Datadog deep links for traces and their logs."""

from urllib.parse import quote

DEFAULT_DATADOG_SITE = "app.datadoghq.com"


def trace_url(trace_id: str, site: str = DEFAULT_DATADOG_SITE) -> str:
    return f"https://{site}/apm/trace/{quote(trace_id, safe='')}"


def logs_url(trace_id: str, from_ts: int, site: str = DEFAULT_DATADOG_SITE) -> str:
    """Log search for one trace, starting at *from_ts* (ms since epoch)."""
    return f"https://{site}/logs?query=trace_id%3A{quote(trace_id, safe='')}&from_ts={from_ts}"
