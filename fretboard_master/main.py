#!/usr/bin/env python3

import argparse
import os
import sys
from typing import List, Optional

from fretboard_master.core.config import ConfigManager
from fretboard_master.core.factory import ComponentFactory
from fretboard_master.logging_config import get_logger
from fretboard_master.logging_config import setup_logging
from fretboard_master.note_types import Difficulty


def parse_arguments(args: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Fretboard Master - find the note on the fretboard before time runs out"
    )

    # UI settings
    parser.add_argument(
        "--ui",
        type=str,
        default="pygame",
        choices=["pygame", "curses"],
        help="UI to use (default: pygame).",
    )

    # Game settings
    parser.add_argument(
        "--difficulty",
        type=str.lower,
        choices=[d.name.lower() for d in Difficulty],
        help="Starting difficulty (default: from configuration, beginner).",
    )
    parser.add_argument(
        "--strings",
        type=int,
        nargs="+",
        choices=range(1, 7),
        metavar="N",
        help="Strings to practice, 1 (high E) to 6 (low E). Default: all.",
    )

    # Audio settings
    parser.add_argument(
        "--no-audio", action="store_true", help="Do not play the target note."
    )
    parser.add_argument("--device", type=int, help="Audio output device ID.")

    # Configuration
    parser.add_argument(
        "--config-dir",
        type=str,
        help="Configuration directory (default: ~/.config/fretboard_master).",
    )

    # Debugging
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging."
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Log level for fretboard_master modules (e.g. WARNING).",
    )

    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for Fretboard Master."""
    args = parse_arguments(args)

    # Configure logging
    level = "DEBUG" if args.debug else (args.log_level or "INFO")
    config_manager = ConfigManager(args.config_dir)
    log_file = None
    if args.ui == "curses":
        # Console output would scribble over the curses screen
        log_file = os.path.join(str(config_manager.config_dir), "fretboard_master.log")
    setup_logging(level=level, log_file=log_file)
    logger = get_logger(__name__)

    factory = ComponentFactory(config_manager)
    audio_kwargs = {"device": args.device} if args.device is not None else {}
    audio_player = factory.create_audio_player(
        "silent" if args.no_audio else "default", **audio_kwargs
    )
    controller = factory.create_session_controller(
        audio_player=audio_player,
        difficulty=args.difficulty,
        selected_strings=args.strings,
        audio_enabled=False if args.no_audio else None,
    )

    try:
        if args.ui == "curses":
            from fretboard_master.ui.curses_ui import CursesUI

            ui = CursesUI()
            ui.run(controller)
            ui.show_stats(controller)
        else:
            from fretboard_master.ui.pygame_ui import PygameUI

            PygameUI().run(controller)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception:
        logger.exception("An unhandled error occurred in the main application.")
        raise
    finally:
        controller.shutdown()
        controller.scheduler.shutdown()
        logger.info("Fretboard Master is shutting down.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
