"""
Settings management for Preordained Swapper.
Handles loading, saving, and managing application settings.
"""

import json
import os
import traceback
from dataclasses import dataclass, asdict
from typing import Dict, Any

from constants import (
    BACKUP_ZIP,
    BUILDER_EXE,
    CONFIG_FILE,
    DEV_MODE,
    INITIAL_PAK,
    PATCH_PAK,
    SIMTYPE_BATCH,
    STEAM_MODDING_DIR,
    UNPACKER_EXE,
)


@dataclass
class Settings:
    """Application settings with default values."""

    modding_dir: str = ""  # holds pakfileunpacker.exe / pakfilebuilder.exe
    data_dir: str = ""  # holds patch_0.pak and initial_0.pak
    patch_pak: str = PATCH_PAK
    initial_pak: str = INITIAL_PAK
    backup_zip: str = BACKUP_ZIP
    unpacker: str = UNPACKER_EXE
    builder: str = BUILDER_EXE
    batch_file: str = SIMTYPE_BATCH

    def __post_init__(self):
        """Set default paths if not specified."""
        if not self.modding_dir:
            self.modding_dir = _get_default_modding_dir()
        if not self.data_dir:
            self.data_dir = os.path.join(self.modding_dir, "..", "data")

    @property
    def patch_pak_path(self) -> str:
        return os.path.join(self.data_dir, self.patch_pak)

    @property
    def initial_pak_path(self) -> str:
        return os.path.join(self.data_dir, self.initial_pak)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create Settings from dictionary."""
        # Filter out unknown keys
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered_data)


def _get_default_modding_dir() -> str:
    """Get the default modding directory based on environment."""
    if DEV_MODE:
        return STEAM_MODDING_DIR
    return os.getcwd()


def get_default_settings() -> Dict[str, Any]:
    """Get default settings as a dictionary.

    Paths are left empty so they are worked out when Settings is built.
    """
    return {
        k: v for k, v in Settings().to_dict().items()
        if k not in ("modding_dir", "data_dir")
    }


def load_settings(config_file: str = CONFIG_FILE) -> Settings:
    """
    Load settings from config file.

    Returns:
        Settings with defaults for missing values
    """
    loaded = {}

    try:
        if os.path.exists(config_file):
            with open(config_file, "r") as f:
                loaded = json.load(f)
    except (OSError, ValueError) as e:
        from utils.logging import log_error

        log_error(
            "Failed to load settings, using defaults",
            type(e).__name__,
            traceback.format_exc(),
        )
        loaded = {}

    settings = get_default_settings()
    settings.update(loaded)
    return Settings.from_dict(settings)


def save_settings(settings_to_save: Settings, config_file: str = CONFIG_FILE) -> bool:
    """
    Save settings to config file.

    Args:
        settings_to_save: Settings to save

    Returns:
        True if successful, False otherwise
    """
    try:
        # Create directory if it doesn't exist
        config_dir = os.path.dirname(config_file)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(settings_to_save.to_dict(), f, indent=2)
        return True
    except OSError as e:
        from utils.logging import log_error

        log_error("Failed to save settings", type(e).__name__, traceback.format_exc())
        return False
