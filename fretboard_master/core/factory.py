"""Factory for creating Fretboard Master components."""

from typing import Any, Dict, Optional, Type

from ..logging_config import get_logger
from ..audio.tone_player import SilentAudioPlayer, SoundDeviceTonePlayer
from ..fretboard import ALL_STRINGS
from ..note_types import Difficulty
from ..scheduler import ManualScheduler, ThreadingScheduler
from ..session import SessionController
from .config import ConfigManager
from .interfaces import IAudioPlayer, IScheduler

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Fretboard Master components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.scheduler_classes: Dict[str, Type[IScheduler]] = {
            "default": ThreadingScheduler,
            "manual": ManualScheduler,
        }

        self.audio_player_classes: Dict[str, Type[IAudioPlayer]] = {
            "default": SoundDeviceTonePlayer,
            "silent": SilentAudioPlayer,
        }

    def create_scheduler(self, implementation: str = "default", **kwargs) -> IScheduler:
        """Create a scheduler.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Scheduler instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.scheduler_classes:
            raise ValueError(f"Unknown scheduler implementation: {implementation}")

        instance = self.scheduler_classes[implementation](**kwargs)
        logger.info(f"Created scheduler: {implementation}")
        return instance

    def create_audio_player(
        self, implementation: str = "default", **kwargs
    ) -> IAudioPlayer:
        """Create an audio player.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Audio player instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.audio_player_classes:
            raise ValueError(f"Unknown audio player implementation: {implementation}")

        cls = self.audio_player_classes[implementation]
        if cls is SilentAudioPlayer:
            instance = cls()
        else:
            # Get default configuration
            config = self.config_manager.get_config("audio")

            # Override with provided parameters
            config.update(kwargs)
            instance = cls(**config)

        logger.info(f"Created audio player: {implementation}")
        return instance

    def session_settings(self, **overrides) -> Dict[str, Any]:
        """Session settings from configuration, validated.

        Invalid values are logged and replaced with their defaults.
        """
        defaults = self.config_manager.default_configs["session"]
        config = self.config_manager.get_config("session")
        config.update({k: v for k, v in overrides.items() if v is not None})

        settings: Dict[str, Any] = {}

        try:
            settings["difficulty"] = Difficulty.parse(config["difficulty"])
        except ValueError as e:
            logger.error(f"{e}; using {defaults['difficulty']}")
            settings["difficulty"] = Difficulty.parse(defaults["difficulty"])

        strings = []
        for string in config.get("selected_strings") or []:
            if string in ALL_STRINGS and string not in strings:
                strings.append(string)
            else:
                logger.error(f"Ignoring invalid string number in configuration: {string!r}")
        settings["selected_strings"] = strings

        settings["audio_enabled"] = bool(config.get("audio_enabled"))

        for key in ("advance_delay", "audio_delay"):
            try:
                value = float(config[key])
                if value < 0:
                    raise ValueError("must not be negative")
            except (TypeError, ValueError) as e:
                logger.error(f"Invalid {key} {config[key]!r} ({e}); using {defaults[key]}")
                value = defaults[key]
            settings[key] = value

        return settings

    def create_session_controller(
        self,
        scheduler: Optional[IScheduler] = None,
        audio_player: Optional[IAudioPlayer] = None,
        **overrides,
    ) -> SessionController:
        """Create a session controller configured from the session settings.

        Args:
            scheduler: Scheduler to use, or None to create the default one
            audio_player: Audio player to use, or None to create the default one
            **overrides: Session settings taking precedence over the configuration

        Returns:
            Session controller instance
        """
        settings = self.session_settings(**overrides)

        if scheduler is None:
            scheduler = self.create_scheduler()
        if audio_player is None:
            audio_player = self.create_audio_player()

        controller = SessionController(
            scheduler=scheduler, audio_player=audio_player, **settings
        )
        logger.info(
            "Created session controller: %s, strings %s, audio %s",
            settings["difficulty"].name.lower(),
            settings["selected_strings"],
            "on" if settings["audio_enabled"] else "off",
        )
        return controller
