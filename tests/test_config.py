"""Tests for the configuration module."""

import argparse
import os
import tempfile
import unittest

import yaml

from timeline_tracing.config import Config, load_config, load_yaml_config
from timeline_tracing.errors import ConfigError, UnknownFormatError
from timeline_tracing.main import build_cli_parser

REQUIRED_ARGS = [
    "--csv", "logs.csv",
    "--field-id", "trace_id",
    "--field-ts", "timestamp",
    "--field-msg", "message",
    "--ts-format", "iso",
    "--begin-regex", "start",
    "--end-regex", "finished",
]


def _write_yaml(data) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        return f.name


class TestConfigDefaults(unittest.TestCase):
    def test_default_values(self):
        cfg = Config()
        self.assertEqual(cfg.threshold, "1s")
        self.assertEqual(cfg.out_file, "output.html")
        self.assertTrue(cfg.only_extreme)
        self.assertEqual(cfg.format, "html")
        self.assertEqual(cfg.operation_regex, "")
        self.assertIsNone(cfg.template_file)
        self.assertEqual(cfg.datadog_site, "app.datadoghq.com")

    def test_frozen(self):
        cfg = Config()
        with self.assertRaises(AttributeError):
            cfg.threshold = "5s"


class TestLoadYamlConfig(unittest.TestCase):
    def test_no_path(self):
        self.assertEqual(load_yaml_config(None), {})
        self.assertEqual(load_yaml_config(""), {})

    def test_valid_file(self):
        path = _write_yaml({"field_id": "trace_id", "only_extreme": False, "threshold": "2s"})
        try:
            data = load_yaml_config(path)
            self.assertEqual(data["field_id"], "trace_id")
            self.assertFalse(data["only_extreme"])
        finally:
            os.unlink(path)

    def test_empty_file(self):
        path = _write_yaml(None)
        try:
            self.assertEqual(load_yaml_config(path), {})
        finally:
            os.unlink(path)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_yaml_config("/nonexistent/path/config.yaml")

    def test_invalid_yaml(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("field_id: [unclosed\n")
            path = f.name
        try:
            with self.assertRaises(ConfigError):
                load_yaml_config(path)
        finally:
            os.unlink(path)

    def test_schema_violations(self):
        path = _write_yaml({"only_extreme": "yes", "colour": "blue"})
        try:
            with self.assertRaises(ConfigError) as ctx:
                load_yaml_config(path)
            self.assertIn("only_extreme", str(ctx.exception))
            self.assertIn("colour", str(ctx.exception))
        finally:
            os.unlink(path)

    def test_path_is_a_directory(self):
        directory = tempfile.mkdtemp()
        try:
            with self.assertRaises(ConfigError) as ctx:
                load_yaml_config(directory)
            self.assertIn("Failed to read config file", str(ctx.exception))
        finally:
            os.rmdir(directory)

    def test_undecodable_file(self):
        with tempfile.NamedTemporaryFile(mode="wb", suffix=".yaml", delete=False) as f:
            f.write(b"field_id: \xff\xfe\n")
            path = f.name
        try:
            with self.assertRaises(ConfigError):
                load_yaml_config(path)
        finally:
            os.unlink(path)


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.parser = build_cli_parser()

    def test_cli_only(self):
        args = self.parser.parse_args(REQUIRED_ARGS)
        cfg = load_config(args, {})
        self.assertEqual(cfg.csv_file, "logs.csv")
        self.assertEqual(cfg.end_regex, "finished")
        self.assertTrue(cfg.only_extreme)
        self.assertEqual(cfg.threshold, "1s")

    def test_camel_case_aliases(self):
        args = self.parser.parse_args([
            "--csv", "logs.csv", "--fieldId", "id", "--fieldTs", "ts",
            "--fieldMsg", "msg", "--tsFormat", "iso", "--beginRegex", "b",
            "--endRegex", "e", "--outFile", "", "--no-onlyExtreme",
        ])
        cfg = load_config(args, {})
        self.assertEqual(cfg.field_id, "id")
        self.assertEqual(cfg.out_file, "")
        self.assertFalse(cfg.only_extreme)

    def test_yaml_fills_missing_cli_values(self):
        args = self.parser.parse_args(["--csv", "other.csv"])
        yaml_data = {
            "csv_file": "logs.csv",
            "field_id": "trace_id",
            "field_ts": "timestamp",
            "field_msg": "message",
            "ts_format": "iso",
            "begin_regex": "start",
            "end_regex": "finished",
            "format": "trace-json",
        }
        cfg = load_config(args, yaml_data)
        self.assertEqual(cfg.csv_file, "other.csv")  # CLI wins
        self.assertEqual(cfg.format, "trace-json")

    def test_cli_bool_overrides_yaml(self):
        args = self.parser.parse_args(REQUIRED_ARGS + ["--only-extreme"])
        cfg = load_config(args, {"only_extreme": False})
        self.assertTrue(cfg.only_extreme)

    def test_missing_required(self):
        args = self.parser.parse_args(["--csv", "logs.csv"])
        with self.assertRaises(ConfigError) as ctx:
            load_config(args, {})
        self.assertIn("field_id", str(ctx.exception))
        self.assertIn("end_regex", str(ctx.exception))

    def test_unknown_format(self):
        args = self.parser.parse_args(REQUIRED_ARGS + ["--format", "svg"])
        with self.assertRaises(UnknownFormatError):
            load_config(args, {})

    def test_reconstruction_settings(self):
        args = self.parser.parse_args(
            REQUIRED_ARGS + ["--operation-regex", r"op (\w+)", "--threshold", "3s"]
        )
        settings = load_config(args, {}).reconstruction_settings()
        self.assertEqual(settings.field_ts, "timestamp")
        self.assertEqual(settings.operation_regex, r"op (\w+)")
        self.assertEqual(settings.threshold, "3s")

    def test_render_options(self):
        args = self.parser.parse_args(
            REQUIRED_ARGS + ["--datadog-site", "app.datadoghq.eu", "--template-file", "t.html"]
        )
        options = load_config(args, {}).render_options()
        self.assertEqual(options.datadog_site, "app.datadoghq.eu")
        self.assertEqual(options.template_file, "t.html")

    def test_non_config_args_are_ignored(self):
        args = argparse.Namespace(config="x.yaml", csv_file="a.csv")
        cfg = load_config(args, {
            "field_id": "i", "field_ts": "t", "field_msg": "m", "ts_format": "iso",
            "begin_regex": "b", "end_regex": "e",
        })
        self.assertEqual(cfg.csv_file, "a.csv")


if __name__ == "__main__":
    unittest.main()
