"""Plugin discovery - resolves plugin sources inside the plugins directory."""

import logging
from pathlib import Path
from typing import List, Union

from mentat.plugins.errors import PluginNotFoundError

logger = logging.getLogger(__name__)


class PluginDiscovery:
    """Finds plugin source files (``*.py``) in a plugins directory."""

    SUFFIX = ".py"

    def __init__(self, plugins_dir: Path):
        self.plugins_dir = Path(plugins_dir)

    def discover_all(self) -> List[Path]:
        """List plugin files in the plugins directory, sorted by name.

        Files starting with ``_`` (e.g. ``__init__.py``) are skipped.
        A missing directory yields an empty list.
        """
        if not self.plugins_dir.is_dir():
            logger.info(f"Plugins directory '{self.plugins_dir}' not found, skipping auto-load")
            return []

        files = [
            item
            for item in sorted(self.plugins_dir.iterdir())
            if item.is_file() and item.suffix == self.SUFFIX and not item.name.startswith("_")
        ]
        logger.info(f"Discovered {len(files)} plugin file(s) in {self.plugins_dir}")
        return files

    def resolve(self, source: Union[str, Path]) -> Path:
        """Resolve a source identifier to an existing plugin file.

        Accepts a path, a file name relative to the plugins directory, or a
        bare stem (``"utility"`` -> ``utility.py``). The result must lie
        inside the plugins directory.

        Raises:
            PluginNotFoundError: if no such file exists in the plugins directory
        """
        path = Path(source)
        if not path.is_absolute():
            path = self.plugins_dir / path
        if path.suffix != self.SUFFIX:
            path = path.with_name(path.name + self.SUFFIX)

        path = path.resolve()
        if not path.is_relative_to(self.plugins_dir.resolve()):
            logger.warning(f"Rejected plugin source outside {self.plugins_dir}: {source}")
            raise PluginNotFoundError(f"Plugin file not found: {source}")
        if not path.is_file():
            raise PluginNotFoundError(f"Plugin file not found: {path}")
        return path
