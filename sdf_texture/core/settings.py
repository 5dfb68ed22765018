"""
Persistent Settings - Remembers the last used generation settings
Stored as YAML under fixed keys so the CLI starts from the previous run
"""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from .config import (
    SDFConfig, InvalidConfiguration,
    DEFAULT_INSIDE_DISTANCE, DEFAULT_OUTSIDE_DISTANCE, DEFAULT_POST_PROCESS_DISTANCE,
)
from .fill import FillMode

logger = logging.getLogger(__name__)


# ============================================================================
# Setting Keys
# ============================================================================

KEY_RGB_FILL_MODE = "rgb_fill_mode"
KEY_INSIDE_DISTANCE = "inside_distance"
KEY_OUTSIDE_DISTANCE = "outside_distance"
KEY_POST_PROCESS_DISTANCE = "post_process_distance"

DEFAULT_SETTINGS: Dict[str, Any] = {
    KEY_RGB_FILL_MODE: FillMode.SOLID_WHITE.value,
    KEY_INSIDE_DISTANCE: DEFAULT_INSIDE_DISTANCE,
    KEY_OUTSIDE_DISTANCE: DEFAULT_OUTSIDE_DISTANCE,
    KEY_POST_PROCESS_DISTANCE: DEFAULT_POST_PROCESS_DISTANCE,
}

# Setting key -> SDFConfig field
_FIELD_FOR_KEY = {
    KEY_RGB_FILL_MODE: 'fill_mode',
    KEY_INSIDE_DISTANCE: 'inside_distance',
    KEY_OUTSIDE_DISTANCE: 'outside_distance',
    KEY_POST_PROCESS_DISTANCE: 'post_process_distance',
}


# ============================================================================
# Settings Store
# ============================================================================

class SettingsStore:
    """
    Loads and saves generation settings in a YAML file.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize settings store.

        Args:
            path: Settings file (default: ~/.sdf-texture/settings.yaml)
        """
        self.path = Path(path) if path else Path.home() / '.sdf-texture' / 'settings.yaml'

    def _read(self) -> Dict[str, Any]:
        """Raw stored values, empty if the file is missing or unreadable"""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read settings file %s: %s", self.path, e)
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected a mapping", self.path)
            return {}
        return data

    def load(self) -> SDFConfig:
        """
        Load stored settings into a config.
        Missing or invalid values fall back to the defaults one by one.
        """
        stored = self._read()
        values = {}

        for key, default in DEFAULT_SETTINGS.items():
            value = stored.get(key, default)
            field_name = _FIELD_FOR_KEY[key]
            try:
                # Validate each value on its own against default companions
                candidate = SDFConfig(**{field_name: value})
                candidate.validate()
            except (InvalidConfiguration, TypeError) as e:
                logger.warning("Invalid stored value for %s (%r), using default: %s", key, value, e)
                value = default
            values[field_name] = value

        return SDFConfig(**values)

    def save(self, config: SDFConfig) -> Path:
        """
        Save the persistent part of a config.

        Returns:
            Path to saved file
        """
        data = {
            KEY_RGB_FILL_MODE: config.fill_mode.value,
            KEY_INSIDE_DISTANCE: float(config.inside_distance),
            KEY_OUTSIDE_DISTANCE: float(config.outside_distance),
            KEY_POST_PROCESS_DISTANCE: float(config.post_process_distance),
        }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.debug("Saved settings to %s", self.path)
        return self.path

    def reset(self) -> bool:
        """
        Delete the settings file.

        Returns:
            True if a file was removed
        """
        if not self.path.exists():
            return False
        self.path.unlink()
        return True

    def as_dict(self) -> Dict[str, Any]:
        """Effective settings keyed by their stored names"""
        config = self.load()
        data = {key: getattr(config, name) for key, name in _FIELD_FOR_KEY.items()}
        data[KEY_RGB_FILL_MODE] = config.fill_mode.value
        return data
