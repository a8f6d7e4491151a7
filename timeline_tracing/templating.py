"""Jinja2 template loading for the HTML outputs."""

import os

from jinja2 import (
    Environment,
    FileSystemLoader,
    PackageLoader,
    Template,
    TemplateError,
    select_autoescape,
)

from timeline_tracing.errors import RenderError

TIMELINE_TEMPLATE = "timeline.html"
DATADOG_TEMPLATE = "timeline_datadog.html"
PERFETTO_TEMPLATE = "open_with_perfetto.html"

_package_env = Environment(
    loader=PackageLoader("timeline_tracing", "templates"),
    autoescape=select_autoescape(["html"]),
)


def load_template(name: str, template_file: str | None = None) -> Template:
    """Load a bundled template, or *template_file* when one is given."""
    try:
        if template_file:
            directory, filename = os.path.split(os.path.abspath(template_file))
            env = Environment(
                loader=FileSystemLoader(directory),
                autoescape=select_autoescape(["html", "htm", "j2"]),
            )
            return env.get_template(filename)
        return _package_env.get_template(name)
    except (TemplateError, OSError) as e:
        raise RenderError(f"Failed to parse the template file {template_file or name!r}: {e}") from e


def render_template(template: Template, **context) -> str:
    try:
        return template.render(**context)
    except (TemplateError, OSError) as e:
        raise RenderError(f"Failed to fill the template: {e}") from e
