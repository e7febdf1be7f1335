"""Configuration loading.

Settings come from a YAML file, then environment variables, then CLI options
(applied by the caller).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

CONFIG_ENV_VAR = "AWSSWEEP_CONFIG"
LOCAL_CONFIG_FILE = ".awssweep.yaml"
USER_CONFIG_FILE = Path.home() / ".awssweep" / "config.yaml"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Configuration file or value is invalid."""


@dataclass
class Config:
    """Sweeper configuration.

    Attributes:
        aws_profile: AWS profile name (optional)
        regions: Regions swept when none are given on the command line
        log_level: Log level name
        max_workers: Maximum concurrent deletions per kind
        max_retries: Attempts per deletion when throttled
        allow_failures: Run dependent kinds even when a dependency failed
        audit_dir: Directory for YAML run reports (optional)
    """

    aws_profile: Optional[str] = None
    regions: list[str] = field(default_factory=list)
    log_level: str = "INFO"
    max_workers: int = 10
    max_retries: int = 5
    allow_failures: bool = False
    audit_dir: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load configuration.

        Args:
            path: Explicit config file path (optional). Otherwise the first of
                $AWSSWEEP_CONFIG, ./.awssweep.yaml, ~/.awssweep/config.yaml

        Returns:
            Config with file values and environment overrides applied

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values
        """
        config_file = cls._find_config_file(path)
        data: dict[str, Any] = {}

        if config_file is not None:
            try:
                with open(config_file, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config file {config_file}: {e}") from e

            if not isinstance(data, dict):
                raise ConfigError(f"Config file {config_file} must contain a mapping")

        config = cls.from_dict(data)
        config.apply_env(os.environ)
        config.validate()
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        config = cls(**data)
        if isinstance(config.regions, str):
            config.regions = _split_list(config.regions)
        return config

    def apply_env(self, environ: Any) -> None:
        """Apply environment variable overrides."""
        if environ.get("AWS_PROFILE"):
            self.aws_profile = environ["AWS_PROFILE"]
        if environ.get("AWSSWEEP_REGIONS"):
            self.regions = _split_list(environ["AWSSWEEP_REGIONS"])
        if environ.get("AWSSWEEP_LOG_LEVEL"):
            self.log_level = environ["AWSSWEEP_LOG_LEVEL"]
        if environ.get("AWSSWEEP_MAX_WORKERS"):
            try:
                self.max_workers = int(environ["AWSSWEEP_MAX_WORKERS"])
            except ValueError:
                raise ConfigError("AWSSWEEP_MAX_WORKERS must be an integer") from None

    def validate(self) -> bool:
        """Validate configuration values.

        Returns:
            True if validation passes

        Raises:
            ConfigError: If any value is invalid
        """
        if not isinstance(self.log_level, str) or self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigError(f"Invalid log_level: {self.log_level}")
        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ConfigError("max_workers must be a positive integer")
        if not isinstance(self.max_retries, int) or self.max_retries < 1:
            raise ConfigError("max_retries must be a positive integer")
        if not isinstance(self.regions, list) or not all(isinstance(r, str) for r in self.regions):
            raise ConfigError("regions must be a list of region names")
        return True

    @staticmethod
    def _find_config_file(path: Optional[str]) -> Optional[Path]:
        if path:
            return Path(path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)

        for candidate in (Path(LOCAL_CONFIG_FILE), USER_CONFIG_FILE):
            if candidate.is_file():
                return candidate

        return None


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]
