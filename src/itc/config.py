"""Configuration loading from ~/.itc.json and ITC_* environment variables."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from itc.exceptions import ConfigError
from itc.models import Config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".itc.json"
ENV_PREFIX = "ITC_"

DEFAULT_CONFIG = Config(
    apple_id="",
    apple_id_password="",
    timeout=30.0,
    retries=0,
)


class ConfigLoader:
    """Loads the CLI configuration, letting environment variables win over the file."""

    def __init__(
        self,
        config_path: Path | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self._explicit_path = config_path is not None
        self._environ = os.environ if environ is None else environ

    def _read_file(self) -> dict:
        if not self.config_path.exists():
            if self._explicit_path:
                raise ConfigError(f"Config file not found: {self.config_path}")
            return {}

        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Failed to read config file {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a JSON object")
        logger.debug("Using config file: %s", self.config_path)
        return data

    def _env(self, key: str) -> Optional[str]:
        return self._environ.get(f"{ENV_PREFIX}{key.upper()}") or None

    def get_config(self) -> Config:
        """Load config from the config file, then overlay environment variables."""
        data = self._read_file()

        def lookup(key: str, default):
            value = self._env(key)
            if value is not None:
                return value
            return data.get(key, default)

        try:
            return Config(
                apple_id=str(lookup("appleID", DEFAULT_CONFIG.apple_id)),
                apple_id_password=str(lookup("appleIDPassword", DEFAULT_CONFIG.apple_id_password)),
                timeout=float(lookup("timeout", DEFAULT_CONFIG.timeout)),
                retries=int(lookup("retries", DEFAULT_CONFIG.retries)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e
