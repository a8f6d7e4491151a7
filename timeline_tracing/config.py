"""Configuration loading from CLI args and an optional YAML file.

Precedence: CLI flag > YAML value > default.
"""

import logging
from dataclasses import dataclass, fields

import jsonschema
import yaml

from timeline_tracing.errors import ConfigError
from timeline_tracing.links import DEFAULT_DATADOG_SITE
from timeline_tracing.models import RenderOptions
from timeline_tracing.reconstructor import ReconstructionSettings
from timeline_tracing.renderers import FORMAT_HTML, get_renderer

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = (
    "csv_file",
    "field_id",
    "field_ts",
    "field_msg",
    "ts_format",
    "begin_regex",
    "end_regex",
)

CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "csv_file": {"type": "string"},
        "field_id": {"type": "string"},
        "field_ts": {"type": "string"},
        "field_msg": {"type": "string"},
        "ts_format": {"type": "string"},
        "begin_regex": {"type": "string"},
        "end_regex": {"type": "string"},
        "operation_regex": {"type": "string"},
        "threshold": {"type": "string"},
        "out_file": {"type": "string"},
        "only_extreme": {"type": "boolean"},
        "format": {"type": "string"},
        "template_file": {"type": "string"},
        "datadog_site": {"type": "string"},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
    },
}

_validator = jsonschema.Draft202012Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class Config:
    csv_file: str = ""
    field_id: str = ""
    field_ts: str = ""
    field_msg: str = ""
    ts_format: str = ""
    begin_regex: str = ""
    end_regex: str = ""
    operation_regex: str = ""
    threshold: str = "1s"
    out_file: str = "output.html"
    only_extreme: bool = True
    format: str = FORMAT_HTML
    template_file: str | None = None
    datadog_site: str = DEFAULT_DATADOG_SITE
    log_level: str = "INFO"

    def reconstruction_settings(self) -> ReconstructionSettings:
        return ReconstructionSettings(
            field_id=self.field_id,
            field_ts=self.field_ts,
            field_msg=self.field_msg,
            ts_format=self.ts_format,
            begin_regex=self.begin_regex,
            end_regex=self.end_regex,
            operation_regex=self.operation_regex,
            threshold=self.threshold,
        )

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            datadog_site=self.datadog_site,
            template_file=self.template_file,
        )


def load_yaml_config(path: str | None) -> dict:
    """Load and validate settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigError(f"Config file {path} not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    errors = sorted(_validator.iter_errors(data), key=lambda err: list(err.path))
    if errors:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err.path) or '<root>'}: {err.message}"
            for err in errors
        )
        raise ConfigError(f"Invalid config file {path}: {messages}")

    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config from parsed CLI args and YAML data."""
    values = {}
    for f in fields(Config):
        cli_value = getattr(cli_args, f.name, None)
        if cli_value is not None:
            values[f.name] = cli_value
        elif f.name in yaml_data:
            values[f.name] = yaml_data[f.name]

    missing = [name for name in REQUIRED_SETTINGS if not values.get(name)]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    config = Config(**values)
    get_renderer(config.format)
    return config
