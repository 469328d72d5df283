"""Handles writing subtitle cues to disk (SRT)."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Sequence

from .models import Cue
from .exceptions import FileSystemError, FormattingError
from .utils import ensure_dir_exists, format_time_srt

logger = logging.getLogger(__name__)

WRITE_ERROR_POLICIES = ("raise", "ignore")

class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    def __init__(self, on_write_error: str = "raise"):
        """
        Args:
            on_write_error: "raise" to surface output failures as FileSystemError,
                            "ignore" to log them and carry on without a file.
        """
        if on_write_error not in WRITE_ERROR_POLICIES:
            raise FormattingError(f"Unknown write error policy '{on_write_error}'. Choose one of {WRITE_ERROR_POLICIES}.")
        self.on_write_error = on_write_error

    @abstractmethod
    def render_cue(self, cue: Cue) -> str:
        """Returns the text block for a single cue."""
        pass

    def write_cues(self, cues: Sequence[Cue], output_path: str) -> bool:
        """
        Writes every cue, in order, to output_path.

        An empty cue sequence still produces an (empty) file.

        Args:
            cues: The cues to write.
            output_path: Destination file path.

        Returns:
            True if the file was written, False if a failure was ignored.

        Raises:
            FileSystemError: If the file cannot be written and the policy is "raise".
        """
        logger.info(f"Writing {len(cues)} subtitle blocks to: {output_path}")
        try:
            parent = os.path.dirname(output_path)
            if parent:
                ensure_dir_exists(parent)
            with open(output_path, 'w', encoding='utf-8') as f:
                for cue in cues:
                    f.write(self.render_cue(cue))
        except (OSError, FileSystemError) as e:
            if self.on_write_error == "ignore":
                logger.warning(f"Could not write subtitle file {output_path}: {e}. Output dropped.")
                return False
            logger.error(f"Failed to write subtitle file {output_path}: {e}")
            if isinstance(e, FileSystemError):
                raise
            raise FileSystemError(f"Could not write subtitle file {output_path}: {e}") from e

        logger.info(f"Successfully wrote {len(cues)} subtitle blocks to {output_path}")
        return True


class SRTFormatter(SubtitleFormatter):
    """Formats subtitles into the SRT (SubRip Text) format."""

    def render_cue(self, cue: Cue) -> str:
        start_time_str = format_time_srt(cue.start)
        end_time_str = format_time_srt(cue.end)
        return f"{cue.index}\n{start_time_str} --> {end_time_str}\n{cue.text}\n\n"
