#!/usr/bin/env python3

import argparse
import sys
from typing import List, Optional

from pitch_quiz.logging_config import setup_logging
from pitch_quiz.logger import get_logger
from pitch_quiz.errors import ConfigError, MicrophoneError
from pitch_quiz.core.config import ConfigManager
from pitch_quiz.note_types import NotationScheme


def parse_arguments(args: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Pitch Quiz - sing or play the note you are shown"
    )

    # UI settings
    parser.add_argument(
        "--ui",
        type=str,
        default="console",
        choices=["console", "pygame"],
        help="UI to use (default: console).",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until closed).",
    )

    # Notation settings (default: saved configuration)
    parser.add_argument(
        "--accidentals",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include sharps in the target notes.",
    )
    parser.add_argument(
        "--alternative-notation",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use German note names (Cis, Dis, ..., H).",
    )

    # Matching settings
    parser.add_argument(
        "--confidence",
        type=float,
        default=None,
        help="Minimum pitch confidence to score a note (default: 0.95).",
    )
    parser.add_argument(
        "--cooldown",
        type=float,
        default=None,
        help="Seconds to wait after a correct note (default: 1.2).",
    )
    parser.add_argument(
        "--avoid-repeat",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Never pick the same target twice in a row.",
    )

    # Audio settings
    parser.add_argument("--device", type=int, help="Audio input device ID.")
    parser.add_argument("--sample-rate", type=int, help="Preferred sample rate in Hz.")
    parser.add_argument(
        "--frame-length", type=int, help="Samples per analysis frame (default: 2048)."
    )
    parser.add_argument(
        "--wav", type=str, help="Replay a WAV file instead of using the microphone."
    )
    parser.add_argument(
        "--config-dir", type=str, help="Directory holding the JSON configuration."
    )

    # Debugging
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")

    return parser.parse_args(args)


def _pick(value, default):
    return default if value is None else value


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for Pitch Quiz.

    Returns:
        Exit code (0 for success, 1 when audio input could not be opened,
        2 for invalid configuration)
    """
    parsed = parse_arguments(args)

    setup_logging(level="DEBUG" if parsed.debug else "INFO")
    logger = get_logger(__name__)

    # Heavy imports after logging is configured
    from pitch_quiz.session import PracticeSession

    config_manager = ConfigManager(parsed.config_dir)
    audio_config = config_manager.get_config("audio_input")
    engine_config = config_manager.get_config("match_engine")

    try:
        notation = config_manager.notation_config()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    if parsed.accidentals is not None:
        notation.include_accidentals = parsed.accidentals
    if parsed.alternative_notation is not None:
        notation.scheme = (
            NotationScheme.ALTERNATIVE
            if parsed.alternative_notation
            else NotationScheme.WESTERN
        )

    if parsed.ui == "pygame":
        from pitch_quiz.ui.pygame_ui import PygameUI

        ui = PygameUI(notation)
        ui.init_screen()
    else:
        from pitch_quiz.ui.console import ConsolePresentation

        ui = ConsolePresentation(notation)

    session = None
    try:
        if parsed.wav:
            from pitch_quiz.audio.wav_input import WavFileInput

            audio_input = WavFileInput(parsed.wav)
        else:
            try:
                from pitch_quiz.audio.audio_input import SoundDeviceInput
            except OSError as e:
                # sounddevice raises OSError when the PortAudio library is missing
                raise MicrophoneError(f"Audio input is not supported here: {e}") from e

            audio_input = SoundDeviceInput(
                device_id=_pick(parsed.device, audio_config["device_id"]),
                sample_rate=_pick(parsed.sample_rate, audio_config["sample_rate"]),
                channels=audio_config["channels"],
            )

        session = PracticeSession(
            audio_input,
            ui,
            frame_length=_pick(parsed.frame_length, audio_config["frame_length"]),
            confidence_threshold=_pick(
                parsed.confidence, engine_config["confidence_threshold"]
            ),
            cooldown_seconds=_pick(parsed.cooldown, engine_config["cooldown_seconds"]),
            avoid_repeat=_pick(parsed.avoid_repeat, engine_config["avoid_repeat"]),
        )
        session.start()

        if parsed.ui == "pygame":
            ui.run(session, duration=parsed.duration)
        else:
            session.run(duration=parsed.duration)

    except MicrophoneError as e:
        if session is None:
            ui.show_error(str(e))
        if parsed.ui == "pygame":
            ui.wait_for_close()
        return 1
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        if session is not None:
            session.stop()
        if parsed.ui == "pygame":
            ui.cleanup()
        logger.info("Pitch Quiz is shutting down.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
