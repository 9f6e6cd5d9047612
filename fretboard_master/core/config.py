"""Configuration management for Fretboard Master components."""

from typing import Dict, Any, Optional
import copy
import json
import os
from pathlib import Path

from ..logging_config import get_logger

logger = get_logger(__name__)


class ConfigManager:
    """Configuration manager for Fretboard Master components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/fretboard_master by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "fretboard_master")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "session": {
                "difficulty": "beginner",
                "selected_strings": [6, 5, 4, 3, 2, 1],
                "audio_enabled": True,
                "advance_delay": 1.5,
                "audio_delay": 0.1,
            },
            "audio": {
                "sample_rate": 44100,
                "tone_duration": 0.8,
                "volume": 0.3,
                "device": None,
            },
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                if not isinstance(config, dict):
                    raise ValueError("top-level value must be an object")
                logger.info(f"Loaded configuration from {config_file}")

                # Ensure all default keys are present
                for key, value in default_config.items():
                    if key not in config:
                        config[key] = copy.deepcopy(value)

                return config
            except Exception as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return copy.deepcopy(default_config)
        else:
            # Create default configuration
            config = copy.deepcopy(default_config)
            self.save_config(name, config)
            return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except Exception as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Args:
            name: Configuration name

        Returns:
            Configuration dictionary
        """
        return copy.deepcopy(self.configs.get(name, {}))
