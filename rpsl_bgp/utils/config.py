#!/usr/bin/env python3
"""
Configuration Management for RPSL BGP

Provides configuration handling with:
- Environment variable support
- Configuration file support
- Default values and validation

The configuration is an explicit object built once at startup and passed
down to the commands that need it.
"""

import os
import json
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional, Dict, List
import logging

from rpsl_bgp.utils.error_handling import ConfigurationError


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.lower() in ["1", "true", "yes"]


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    log_to_file: bool = False
    log_file: Optional[str] = None
    console_colors: bool = True

    def __post_init__(self):
        """Load from environment variables if not set"""
        if os.getenv("RPSL_BGP_LOG_LEVEL"):
            self.level = os.getenv("RPSL_BGP_LOG_LEVEL").upper()
        if os.getenv("RPSL_BGP_LOG_FILE"):
            self.log_file = os.getenv("RPSL_BGP_LOG_FILE")
            self.log_to_file = True


@dataclass
class EmitterConfig:
    """Output emitter selection and arguments"""

    name: str = "json"
    arguments: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Load from environment variables if not set"""
        if os.getenv("RPSL_BGP_EMITTER"):
            self.name = os.getenv("RPSL_BGP_EMITTER").lower()


@dataclass
class InputConfig:
    """Input handling configuration"""

    input_path: Optional[str] = None
    output_path: Optional[str] = None
    encoding: str = "utf-8"
    strict: bool = False
    excerpt_lines: int = 3

    def __post_init__(self):
        """Load from environment variables if not set"""
        strict = _env_flag("RPSL_BGP_STRICT")
        if strict is not None:
            self.strict = strict


@dataclass
class ResolutionConfig:
    """Policy resolution configuration"""

    wildcard_peer_address: str = "0.0.0.0"
    export_attributes: List[str] = None

    def __post_init__(self):
        """Set default attribute list if not provided"""
        if self.export_attributes is None:
            self.export_attributes = ["export"]


@dataclass
class RpslBgpConfig:
    """Main configuration container"""

    logging: LoggingConfig = None
    emitter: EmitterConfig = None
    input: InputConfig = None
    resolution: ResolutionConfig = None

    def __post_init__(self):
        """Initialize subconfigs if not provided"""
        if self.logging is None:
            self.logging = LoggingConfig()
        if self.emitter is None:
            self.emitter = EmitterConfig()
        if self.input is None:
            self.input = InputConfig()
        if self.resolution is None:
            self.resolution = ResolutionConfig()


class ConfigManager:
    """Configuration management for RPSL BGP"""

    DEFAULT_CONFIG_PATHS = [
        Path.home() / ".config/rpsl-bgp/config.json",
        Path("/etc/rpsl-bgp/config.json"),
        Path("./rpsl-bgp.json"),
    ]

    def __init__(self, config_path: Optional[Path] = None, search_defaults: bool = True):
        """
        Initialize configuration manager

        Args:
            config_path: Optional path to configuration file
            search_defaults: Look in the default locations when no path is given
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else None
        self.search_defaults = search_defaults
        self.config = RpslBgpConfig()

        self._load_config()

    def _load_config(self):
        """Load configuration from file and environment"""
        config_file = self._find_config_file()
        if config_file:
            try:
                self._load_from_file(config_file)
                self.logger.info(f"Loaded configuration from {config_file}")
            except (OSError, ValueError, TypeError) as e:
                if self.config_path:
                    raise ConfigurationError(
                        f"Failed to load config file {config_file}: {e}",
                        guidance="Check that the file is valid JSON with known sections"
                    ) from e
                self.logger.warning(f"Failed to load config file {config_file}: {e}")

        # Environment variables are loaded in __post_init__ methods
        self.logger.debug("Configuration loaded with environment variable overrides")

    def _find_config_file(self) -> Optional[Path]:
        """Find configuration file in default locations"""
        if self.config_path:
            if self.config_path.exists():
                return self.config_path
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}",
                guidance="Check the --config path"
            )

        if not self.search_defaults:
            return None

        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path

        return None

    def _load_from_file(self, config_path: Path):
        """Load configuration from JSON file"""
        with open(config_path, "r") as f:
            data = json.load(f)
        self._load_from_dict(data)

    def _load_from_dict(self, data: dict):
        """Load configuration from dictionary"""
        if "logging" in data:
            self.config.logging = LoggingConfig(**data["logging"])

        if "emitter" in data:
            self.config.emitter = EmitterConfig(**data["emitter"])

        if "input" in data:
            self.config.input = InputConfig(**data["input"])

        if "resolution" in data:
            self.config.resolution = ResolutionConfig(**data["resolution"])

    def save_config(self, config_path: Optional[Path] = None) -> Path:
        """
        Save current configuration to file

        Args:
            config_path: Path to save configuration (default: first default path)

        Returns:
            Path where configuration was saved
        """
        if config_path is None:
            config_path = self.DEFAULT_CONFIG_PATHS[0]
        config_path = Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = {
            "logging": asdict(self.config.logging),
            "emitter": asdict(self.config.emitter),
            "input": asdict(self.config.input),
            "resolution": asdict(self.config.resolution),
        }

        with open(config_path, "w") as f:
            json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {config_path}")
        return config_path

    def get_config(self) -> RpslBgpConfig:
        """Get current configuration"""
        return self.config

    def validate_config(self) -> List[str]:
        """
        Validate the loaded configuration

        Returns:
            List of human readable issues (empty when valid)
        """
        from rpsl_bgp.emitters import list_emitters

        issues = []

        if self.config.logging.level.upper() not in VALID_LOG_LEVELS:
            issues.append(f"Invalid log level: {self.config.logging.level}")
        if self.config.logging.log_to_file and not self.config.logging.log_file:
            issues.append("log_to_file enabled but no log_file configured")

        if self.config.emitter.name not in list_emitters():
            issues.append(
                f"Unknown emitter '{self.config.emitter.name}' "
                f"(available: {', '.join(list_emitters())})"
            )

        if self.config.input.excerpt_lines < 0:
            issues.append("input.excerpt_lines must not be negative")

        if not self.config.resolution.export_attributes:
            issues.append("resolution.export_attributes must not be empty")

        return issues


def load_config(config_path: Optional[Path] = None, search_defaults: bool = True) -> RpslBgpConfig:
    """Build a fresh configuration object from file and environment"""
    return ConfigManager(config_path, search_defaults=search_defaults).get_config()
