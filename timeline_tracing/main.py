#!/usr/bin/env python3
"""timeline-tracing — rebuild begin/end event timelines from a CSV log export."""

import argparse
import logging
import sys

from timeline_tracing.config import load_config, load_yaml_config
from timeline_tracing.errors import TimelineError
from timeline_tracing.reader import read_records
from timeline_tracing.reconstructor import reconstruct
from timeline_tracing.renderers import VALID_FORMATS, get_renderer
from timeline_tracing.selection import get_strategy

# Diagnostics go to stderr so rendered output can be piped from stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [TIMELINE] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timeline-tracing",
        description="Rebuild begin/end event timelines from a CSV log export.",
    )
    parser.add_argument("--csv", dest="csv_file", help="Input CSV file")
    parser.add_argument(
        "--field-id", "--fieldId", dest="field_id",
        help="Header name of the identifier column",
    )
    parser.add_argument(
        "--field-ts", "--fieldTs", dest="field_ts",
        help="Header name of the timestamp column",
    )
    parser.add_argument(
        "--field-msg", "--fieldMsg", dest="field_msg",
        help="Header name of the message column",
    )
    parser.add_argument(
        "--ts-format", "--tsFormat", dest="ts_format",
        help="Timestamp format: strftime directives, a Go reference layout, or 'iso'",
    )
    parser.add_argument(
        "--begin-regex", "--beginRegex", dest="begin_regex",
        help="Regex that matches a beginning message",
    )
    parser.add_argument(
        "--end-regex", "--endRegex", dest="end_regex",
        help="Regex that matches an ending message",
    )
    parser.add_argument(
        "--operation-regex", "--operationRegex", dest="operation_regex",
        help="Regex whose single capture group is the operation name",
    )
    parser.add_argument(
        "--threshold",
        help="Minimal slice duration to keep in threshold mode (default: 1s)",
    )
    parser.add_argument(
        "--out-file", "--outFile", dest="out_file",
        help="Output path, empty for stdout (default: output.html)",
    )
    parser.add_argument(
        "--only-extreme", "--onlyExtreme", dest="only_extreme",
        action=argparse.BooleanOptionalAction, default=None,
        help="Show only traces ongoing at the peak-concurrency moment, "
             "ignoring the threshold (default: on)",
    )
    parser.add_argument(
        "--format",
        help=f"Output format: {', '.join(VALID_FORMATS)} (default: html)",
    )
    parser.add_argument(
        "--template-file", "--templateFile", dest="template_file",
        help="Custom Jinja2 template for the html formats",
    )
    parser.add_argument(
        "--datadog-site", dest="datadog_site",
        help="Datadog host used for trace/log links (default: app.datadoghq.com)",
    )
    parser.add_argument(
        "--config", default=None,
        help="YAML file with any of the settings above (snake_case keys)",
    )
    parser.add_argument(
        "--log-level", dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    return parser


def run(config) -> None:
    """Load, reconstruct, select and render according to *config*."""
    settings = config.reconstruction_settings()
    records = read_records(
        config.csv_file, (settings.field_id, settings.field_ts, settings.field_msg)
    )
    result = reconstruct(records, settings)

    logger.info("Max ongoing count of operations is: %d, listing traces:",
                result.peak_concurrency)
    for trace_id in sorted(result.extreme_snapshot):
        logger.info("\t%s", trace_id)

    strategy = get_strategy(config.only_extreme, result)
    events_to_render = strategy.select(result)
    logger.info("Rendering %d of %d events as %s",
                len(events_to_render), len(result.events), config.format)

    renderer = get_renderer(config.format)
    renderer(events_to_render, config.out_file, config.render_options())


def main(argv=None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args, load_yaml_config(args.config))
        logging.getLogger().setLevel(config.log_level)
        run(config)
    except TimelineError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 1
    except BrokenPipeError:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
