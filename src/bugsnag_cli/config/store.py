"""
Config file storage for Bugsnag CLI.

The config file lives at ``<config home>/.bugsnag/.config.yml`` where the
config home is ``$XDG_CONFIG_HOME`` or ``~/.config``.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..core.errors import ConfigMissingError, ConfigReadError
from .settings import ConfigDocument

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".bugsnag"
CONFIG_FILE_NAME = ".config"
CONFIG_FILE_TYPE = "yml"
BACKUP_SUFFIX = ".bkp"
CONFIG_DIR_MODE = 0o700


def get_config_home() -> Path:
    """Get the user configuration home.

    Returns:
        ``$XDG_CONFIG_HOME`` if set, otherwise ``~/.config``
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home)
    return Path.home() / ".config"


def default_config_path() -> Path:
    return get_config_home() / CONFIG_DIR_NAME / f"{CONFIG_FILE_NAME}.{CONFIG_FILE_TYPE}"


class ConfigStore:
    """Reads and writes the config document."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """Initialize the store.

        Args:
            path: Explicit config file, replaces the default location
        """
        self._path = Path(path).expanduser() if path else None

    def path(self) -> Path:
        """Canonical absolute path of the config file."""
        return (self._path or default_config_path()).absolute()

    def exists(self) -> bool:
        return self.path().is_file()

    def read(self, missing_ok: bool = False) -> ConfigDocument:
        """Load the config document with environment overrides applied.

        Args:
            missing_ok: Return environment-only values when the file is absent

        Returns:
            The loaded document

        Raises:
            ConfigMissingError: If the file is absent and ``missing_ok`` is false
            ConfigReadError: If the file cannot be read or is not a valid document
        """
        path = self.path()
        data = {}

        if self.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigReadError(f"Unable to read config file {path}: {e}", original_error=e) from e

            if not isinstance(data, dict):
                raise ConfigReadError(f"Invalid config file {path}: expected a mapping")
            logger.debug(f"Loaded config file: {path}")
        elif not missing_ok:
            raise ConfigMissingError(path)
        else:
            logger.debug(f"Config file not found: {path}")

        try:
            return ConfigDocument(**data)
        except ValidationError as e:
            raise ConfigReadError(f"Invalid config file {path}: {e}", original_error=e) from e

    def write(self, doc: ConfigDocument) -> Path:
        """Write the config document.

        Missing directories are created with mode 0o700, and
        an existing file is first renamed to ``<name>.bkp``, replacing any
        earlier backup.

        Args:
            doc: Document to persist; its token is not written

        Returns:
            Path of the written file
        """
        path = self.path()
        directory = path.parent

        missing = [d for d in (directory, *directory.parents) if not d.exists()]
        for d in reversed(missing):
            d.mkdir(mode=CONFIG_DIR_MODE, exist_ok=True)

        if path.exists():
            backup = path.with_name(path.name + BACKUP_SUFFIX)
            os.replace(path, backup)
            logger.debug(f"Backed up existing config to: {backup}")

        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(doc.persisted(), f, default_flow_style=False, sort_keys=False)

        logger.debug(f"Wrote config file: {path}")
        return path
