"""Configuration service - manages the bot's config.json file."""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from mentat.constants import DEFAULT_PORT, DEFAULT_PREFIX, DEFAULT_THEME

logger = logging.getLogger(__name__)

# Keys that may exist in memory but are never persisted or exposed
SECRET_KEYS = ("token",)


class ConfigService:
    """Holds the bot configuration and writes it back as a whole file.

    Config format:
    {
        "prefix": "!",
        "port": 3000,
        "theme": "default",
        "plugins": {
            "Utility": {"greeting": "hi"}
        }
    }
    """

    def __init__(self, config_file: Path, defaults: Optional[Dict[str, Any]] = None):
        self.config_file = Path(config_file)
        self._defaults = {
            "prefix": DEFAULT_PREFIX,
            "port": DEFAULT_PORT,
            "theme": DEFAULT_THEME,
            "plugins": {},
        }
        if defaults:
            self._defaults.update(defaults)
        self._config: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load config from file, creating it with defaults if not found."""
        config = copy.deepcopy(self._defaults)
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    config.update(data)
                else:
                    logger.error(f"Ignoring config file {self.config_file}: top level is not an object")
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Error loading config: {e}")
        else:
            logger.info(f"Creating default configuration file {self.config_file}")
            self._config = config
            self._save()

        for key in SECRET_KEYS:
            config.pop(key, None)
        if not isinstance(config.get("plugins"), dict):
            config["plugins"] = {}
        return config

    def _save(self) -> None:
        """Atomically overwrite the config file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.config_file.name}.", suffix=".tmp", dir=self.config_file.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.config_file)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Saved config to {self.config_file}")

    @property
    def prefix(self) -> str:
        return self._config.get("prefix") or DEFAULT_PREFIX

    @property
    def theme(self) -> str:
        return self._config.get("theme") or DEFAULT_THEME

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        """Copy of the whole configuration (secrets excluded)."""
        data = copy.deepcopy(self._config)
        for key in SECRET_KEYS:
            data.pop(key, None)
        return data

    def update(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge top-level values and persist. Secret keys are dropped."""
        values = {k: v for k, v in values.items() if k not in SECRET_KEYS}
        self._config.update(values)
        self._save()
        logger.info(f"Updated config keys: {sorted(values)}")
        return self.as_dict()

    def get_plugin_config(self, plugin_name: str) -> Dict[str, Any]:
        """Get the last saved configuration of one plugin."""
        return dict(self._config.get("plugins", {}).get(plugin_name, {}))

    def set_plugin_config(self, plugin_name: str, config: Dict[str, Any]) -> None:
        """Replace a plugin's saved configuration and persist."""
        plugins = self._config.setdefault("plugins", {})
        plugins[plugin_name] = dict(config)
        self._save()
        logger.info(f"Updated config for plugin: {plugin_name}")

    def reload(self) -> None:
        """Reload config from disk."""
        self._config = self._load()
