"""Global constants and environment-driven defaults."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Chat platform
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN", "")
DEFAULT_PREFIX = os.getenv("PREFIX", "!")
DEFAULT_THEME = os.getenv("THEME", "default")

# Admin HTTP surface
DEFAULT_PORT = int(os.getenv("PORT", "3000"))

# Paths (relative values resolve against the project root)
_plugins_path = Path(os.getenv("PLUGINS_PATH", "plugins"))
PLUGINS_DIR = _plugins_path if _plugins_path.is_absolute() else PROJECT_ROOT / _plugins_path

_config_path = Path(os.getenv("CONFIG_PATH", "config.json"))
CONFIG_FILE = _config_path if _config_path.is_absolute() else PROJECT_ROOT / _config_path

AUTOLOAD_PLUGINS = os.getenv("AUTOLOAD_PLUGINS", "true").lower() in ("1", "true", "yes", "on")

# Embed colours per theme
THEME_COLORS = {
    "default": 0x5865F2,
    "atreides": 0x1E40AF,
    "harkonnen": 0xDC2626,
}

COMMAND_FAILED_NOTICE = "An error occurred while executing this command."
