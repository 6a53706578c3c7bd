"""
Tests for configuration loading, logging setup and error utilities
"""

import json
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rpsl_bgp.utils.config import ConfigManager, RpslBgpConfig, load_config
from rpsl_bgp.utils.error_handling import (
    ConfigurationError, ErrorFormatter, ErrorSeverity, ParameterValidator,
    ValidationError, handle_errors
)
from rpsl_bgp.utils.logging import LoggingTimer, RpslFormatter, get_logger, setup_logging


CLEAN_ENV = {
    key: value for key, value in os.environ.items() if not key.startswith("RPSL_BGP_")
}


@patch.dict(os.environ, CLEAN_ENV, clear=True)
class TestConfigManager(unittest.TestCase):
    """Test configuration files and environment overrides."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def write_config(self, data) -> Path:
        path = Path(self.temp_dir.name) / "config.json"
        path.write_text(json.dumps(data))
        return path

    def test_defaults(self):
        config = load_config(search_defaults=False)

        self.assertEqual(config.emitter.name, "json")
        self.assertEqual(config.logging.level, "INFO")
        self.assertFalse(config.input.strict)
        self.assertEqual(config.resolution.wildcard_peer_address, "0.0.0.0")
        self.assertEqual(config.resolution.export_attributes, ["export"])

    def test_each_load_builds_a_new_config(self):
        self.assertIsNot(load_config(search_defaults=False), load_config(search_defaults=False))

    def test_load_from_file(self):
        path = self.write_config({
            "emitter": {"name": "juniper", "arguments": {"format": "set"}},
            "input": {"strict": True},
            "resolution": {"export_attributes": ["export", "mp-export"]},
        })

        config = load_config(path)

        self.assertEqual(config.emitter.name, "juniper")
        self.assertEqual(config.emitter.arguments, {"format": "set"})
        self.assertTrue(config.input.strict)
        self.assertEqual(config.resolution.export_attributes, ["export", "mp-export"])

    def test_environment_overrides(self):
        with patch.dict(os.environ, {
            "RPSL_BGP_EMITTER": "YAML",
            "RPSL_BGP_STRICT": "true",
            "RPSL_BGP_LOG_LEVEL": "debug",
        }):
            config = RpslBgpConfig()

        self.assertEqual(config.emitter.name, "yaml")
        self.assertTrue(config.input.strict)
        self.assertEqual(config.logging.level, "DEBUG")

    def test_missing_explicit_file(self):
        with self.assertRaises(ConfigurationError):
            load_config(Path(self.temp_dir.name) / "missing.json")

    def test_invalid_explicit_file(self):
        path = Path(self.temp_dir.name) / "broken.json"
        path.write_text("{not json")

        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_unknown_section_key(self):
        path = self.write_config({"emitter": {"colour": "blue"}})

        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_save_and_reload(self):
        manager = ConfigManager(search_defaults=False)
        manager.config.emitter.name = "yaml"
        path = manager.save_config(Path(self.temp_dir.name) / "saved" / "config.json")

        self.assertEqual(load_config(path).emitter.name, "yaml")

    def test_validate_config(self):
        manager = ConfigManager(search_defaults=False)
        self.assertEqual(manager.validate_config(), [])

        manager.config.emitter.name = "cisco"
        manager.config.logging.level = "LOUD"
        issues = manager.validate_config()

        self.assertEqual(len(issues), 2)
        self.assertTrue(any("cisco" in issue for issue in issues))


class TestErrorHandling(unittest.TestCase):
    """Test error formatting and the command error decorator."""

    def test_format_message(self):
        self.assertEqual(ErrorFormatter.format_message("done", ErrorSeverity.INFO), "✓ done")
        self.assertEqual(
            ErrorFormatter.format_message("bad", ErrorSeverity.ERROR, "fix it"),
            "✗ bad\n  Suggestion: fix it"
        )

    def test_format_builtin_errors(self):
        self.assertIn("File not found", ErrorFormatter.format_error(FileNotFoundError("x")))
        self.assertIn("Unexpected error", ErrorFormatter.format_error(RuntimeError("x")))

    def test_parse_key_value_pairs(self):
        self.assertEqual(ParameterValidator.parse_key_value_pairs(["a=1", "b = two"]),
                         {"a": "1", "b": "two"})
        with self.assertRaises(ValidationError):
            ParameterValidator.parse_key_value_pairs(["novalue"])

    def test_handle_errors_exit_codes(self):
        @handle_errors('rpsl-bgp.test')
        def command(error):
            if error:
                raise error
            return 0

        with patch('sys.stderr'):
            self.assertEqual(command(None), 0)
            self.assertEqual(command(ValidationError("bad")), 1)
            self.assertEqual(command(ConfigurationError("bad", ErrorSeverity.FATAL)), 2)
            self.assertEqual(command(RuntimeError("boom")), 1)
            self.assertEqual(command(KeyboardInterrupt()), 130)


class TestLogging(unittest.TestCase):
    """Test logging helpers."""

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.WARNING)

    def test_setup_logging_with_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "logs" / "rpsl-bgp.log"
            handlers = setup_logging(level="DEBUG", log_to_file=True, log_file=str(log_file))

            self.assertEqual(set(handlers), {"console", "file"})
            self.assertEqual(logging.getLogger().level, logging.DEBUG)
            logging.getLogger("rpsl_bgp.test").info("hello")
            handlers["file"].flush()
            self.assertIn("hello", log_file.read_text())
            self.tearDown()

    @patch.dict(os.environ, CLEAN_ENV, clear=True)
    def test_setup_logging_uses_configured_format(self):
        config = RpslBgpConfig()
        config.logging.format = "%(levelname)s|%(name)s|%(message)s"
        config.logging.console_colors = False

        handlers = setup_logging(config)
        record = logging.LogRecord("rpsl_bgp.test", logging.INFO, __file__, 1, "hello", None, None)

        self.assertEqual(handlers["console"].formatter.format(record), "INFO|rpsl_bgp.test|hello")

    def test_formatter_appends_duration(self):
        formatter = RpslFormatter(use_colors=False)
        record = logging.LogRecord("rpsl_bgp", logging.INFO, __file__, 1, "parsed", None, None)
        record.duration = 1.5

        self.assertTrue(formatter.format(record).endswith("parsed [took 1.500s]"))

    def test_time_operation(self):
        logger = get_logger("rpsl_bgp.timed")

        @logger.time_operation("sample operation")
        def operation():
            return 42

        with self.assertLogs("rpsl_bgp.timed", level="INFO") as logs:
            self.assertEqual(operation(), 42)
        self.assertIn("Completed sample operation", logs.output[-1])

    def test_logging_timer(self):
        logger = logging.getLogger("rpsl_bgp.timer")

        with self.assertLogs("rpsl_bgp.timer", level="INFO") as logs:
            with LoggingTimer(logger, "indexing"):
                pass

        self.assertIn("Completed indexing", logs.output[-1])


if __name__ == '__main__':
    unittest.main()
