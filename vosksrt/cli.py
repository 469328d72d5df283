"""Command-Line Interface handler for vosksrt."""

import argparse
import logging
import sys
import threading
from typing import List, Optional

from .config_loader import ConfigLoader, validate_config
from .log_setup import setup_logging
from .audio_source import FileAudioSource, MicrophoneSource
from .recognizer import VoskRecognizer
from .session import SubtitleSession, install_interrupt_handler
from .subtitle_formatter import SRTFormatter
from .exceptions import VoskSrtError

logger = logging.getLogger(__name__) # Get logger for this module

USAGE = (
    "%(prog)s MODEL_PATH INPUT_FILE OUTPUT.srt [options]\n"
    "       %(prog)s MODEL_PATH --mic OUTPUT.srt [options]"
)


class _UsageParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit code 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


class CLIHandler:
    """Parses arguments and runs a transcription session."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = _UsageParser(
            prog="vosksrt",
            usage=USAGE,
            description="vosksrt: Transcribe an audio file or the microphone into an SRT subtitle file with Vosk.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "model_path",
            help="Directory of an unpacked Vosk model."
        )
        parser.add_argument(
            "paths",
            nargs="+",
            metavar="PATH",
            help="INPUT_FILE OUTPUT.srt, or just OUTPUT.srt together with --mic."
        )
        parser.add_argument(
            "--mic",
            action="store_true",
            help="Transcribe the default microphone until interrupted with Ctrl+C."
        )
        parser.add_argument(
            "-c", "--config",
            default=None,
            help="Path to a YAML configuration file. Built-in defaults are used when omitted."
        )
        parser.add_argument(
            "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        parser.add_argument(
            "--max-words",
            type=int,
            default=None, # Default taken from config
            help="Override the maximum number of words per subtitle cue."
        )
        parser.add_argument(
            "--max-duration",
            type=float,
            default=None, # Default taken from config
            help="Override the maximum duration of a subtitle cue, in seconds."
        )
        parser.add_argument(
            "--no-progress",
            action="store_true",
            help="Disable the progress bar when transcribing a file."
        )
        return parser

    def _parse(self, argv: Optional[List[str]]) -> argparse.Namespace:
        args = self.parser.parse_args(argv)
        expected = 1 if args.mic else 2
        if len(args.paths) != expected:
            if args.mic:
                self.parser.error("--mic takes exactly one path: OUTPUT.srt")
            self.parser.error("expected INPUT_FILE and OUTPUT.srt")
        if args.mic:
            args.input_path, args.output_path = None, args.paths[0]
        else:
            args.input_path, args.output_path = args.paths
        return args

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the session. Always exits."""
        args = self._parse(argv)

        log_level = getattr(logging, args.log_level.upper(), logging.WARNING)
        # Console only until the config says where log files go
        setup_logging(log_level=log_level, log_dir=None, log_file=None)

        try:
            config = ConfigLoader().load_config(args.config)
            if args.max_words is not None:
                logger.info(f"Overriding max_words_per_cue from config with CLI argument: {args.max_words}")
                config['max_words_per_cue'] = args.max_words
            if args.max_duration is not None:
                logger.info(f"Overriding max_cue_duration from config with CLI argument: {args.max_duration}")
                config['max_cue_duration'] = args.max_duration
            if args.no_progress:
                config['show_progress'] = False
            validate_config(config)
        except VoskSrtError as e:
            logger.critical(f"Invalid configuration: {e}")
            sys.exit(1)

        setup_logging(log_level=log_level, log_dir=config.get('log_dir'), log_file=config.get('log_file'))

        try:
            self._transcribe(args, config)
            logger.info("vosksrt finished successfully.")
            sys.exit(0)
        except VoskSrtError as e:
            # Setup failures and output write failures
            logger.error(f"A vosksrt error occurred: {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            sys.exit(2) # Use a different exit code for unexpected crashes

    def _transcribe(self, args: argparse.Namespace, config: dict) -> None:
        formatter = SRTFormatter(on_write_error=config['on_write_error'])
        if args.mic:
            source = MicrophoneSource(
                sample_rate=config['sample_rate'],
                frames_per_buffer=config['frames_per_buffer']
            )
        else:
            source = FileAudioSource(
                args.input_path,
                sample_rate=config['sample_rate'],
                chunk_size=config['chunk_size'],
                ffmpeg_path=config.get('ffmpeg_path')
            )

        recognizer = VoskRecognizer(
            args.model_path,
            sample_rate=config['sample_rate'],
            log_level=config['vosk_log_level']
        )
        session = SubtitleSession(
            recognizer,
            formatter,
            max_words=config['max_words_per_cue'],
            max_duration=config['max_cue_duration'],
            show_progress=config['show_progress']
        )

        on_result = None
        if args.mic:
            sys.stderr.write("Listening... press Ctrl+C to stop and finalize.\n")
            on_result = _echo_result

        cancel_event = threading.Event()
        with install_interrupt_handler(cancel_event):
            cues = session.run(source, args.output_path, cancel_event=cancel_event, on_result=on_result)
        logger.info(f"Wrote {len(cues)} cues to {args.output_path}")


def _echo_result(text: str) -> None:
    sys.stderr.write(f"Result: {text}\n")
    sys.stderr.flush()


def main() -> None:
    """Console script entry point."""
    CLIHandler().run()
