"""Configuration loaded from YAML and merged over defaults."""

import copy
import logging

import yaml

from logframes.derived_fields import load_derived_fields

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "query": {
            "max_lines": 1000,
        },
        "tail": {
            "buffer_capacity": 1000,
        },
        "derived_fields": [],
    }

    def __init__(self, config_path=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is not None:
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
                logger.info("Loaded config from %s", config_path)
            except FileNotFoundError:
                logger.warning("Config file %s not found, using defaults", config_path)
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    @property
    def max_lines(self) -> int:
        return self._config["query"]["max_lines"]

    @property
    def buffer_capacity(self) -> int:
        return self._config["tail"]["buffer_capacity"]

    def derived_fields(self):
        """Compiled derived fields. Raises InvalidMatcherConfig."""
        return load_derived_fields(self._config.get("derived_fields") or [])

    def get(self, key, default=None):
        """Get a top-level config key."""
        return self._config.get(key, default)

    def __getitem__(self, key):
        return self._config[key]

    def __contains__(self, key):
        return key in self._config
