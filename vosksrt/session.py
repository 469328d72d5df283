"""Orchestrates a transcription session: audio chunks in, subtitle file out."""

import contextlib
import logging
import signal
import threading
import time
from typing import Callable, List, Optional

from tqdm import tqdm

from .audio_source import AudioSource
from .recognizer import Recognizer
from .result_decoder import decode_result, extract_text
from .segmenter import segment_words, DEFAULT_MAX_WORDS, DEFAULT_MAX_DURATION
from .subtitle_formatter import SubtitleFormatter
from .models import Cue, WordAccumulator

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def install_interrupt_handler(cancel_event: threading.Event):
    """
    Turns SIGINT (and SIGTERM where available) into a cancellation request.

    While active, an interrupt sets cancel_event instead of raising
    KeyboardInterrupt, so the session can stop reading and still finalize.
    Previous handlers are restored on exit. Outside the main thread signal
    handlers cannot be installed and this is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield cancel_event
        return

    def _request_stop(signum, frame):
        logger.warning(f"Received signal {signum}; finishing session and writing subtitles...")
        cancel_event.set()

    signals = [signal.SIGINT]
    if hasattr(signal, "SIGTERM"):
        signals.append(signal.SIGTERM)

    previous = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, _request_stop)
    try:
        yield cancel_event
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


class SubtitleSession:
    """
    Runs one recognition session over any AudioSource.

    Every finalized utterance is decoded and accumulated as the audio flows.
    When the source runs dry or cancellation is requested, the recognizer's
    final result is flushed into the accumulator and the whole word sequence
    is segmented and written exactly once.
    """

    def __init__(
        self,
        recognizer: Recognizer,
        formatter: SubtitleFormatter,
        max_words: int = DEFAULT_MAX_WORDS,
        max_duration: float = DEFAULT_MAX_DURATION,
        show_progress: bool = False
    ):
        """
        Args:
            recognizer: The streaming recognizer. The session closes it when done.
            formatter: Writer for the final cues.
            max_words: Maximum number of words per cue.
            max_duration: Maximum span of a multi-word cue, in seconds.
            show_progress: Show a progress bar when the source knows its size.
        """
        self.recognizer = recognizer
        self.formatter = formatter
        self.max_words = max_words
        self.max_duration = max_duration
        self.show_progress = show_progress

    def run(
        self,
        source: AudioSource,
        output_path: str,
        cancel_event: Optional[threading.Event] = None,
        on_result: Optional[Callable[[str], None]] = None
    ) -> List[Cue]:
        """
        Executes the session from the first chunk to the written subtitle file.

        Args:
            source: Where audio comes from. It is opened and closed here.
            output_path: Destination subtitle file.
            cancel_event: When set, reading stops before the next chunk and
                          the session finalizes with what it has.
            on_result: Called with the transcript text of every finalized utterance.

        Returns:
            The cues that were written.

        Raises:
            AudioSourceError: If the source cannot be opened.
            FileSystemError: If the output cannot be written and the formatter is set to raise.
        """
        start_time = time.time()
        accumulator = WordAccumulator()
        try:
            source.open()
            self._consume(source, accumulator, cancel_event, on_result)
            cues = self._finalize(accumulator, output_path)
        finally:
            try:
                source.close()
            finally:
                self.recognizer.close()

        logger.info(f"Session finished in {time.time() - start_time:.2f} seconds: {len(accumulator)} words, {len(cues)} cues.")
        return cues

    def _consume(self, source, accumulator, cancel_event, on_result) -> None:
        chunk_count = 0
        progress = tqdm(
            total=source.total_bytes,
            unit='B',
            unit_scale=True,
            desc="Recognizing",
            disable=not self.show_progress or source.total_bytes is None
        )
        try:
            for chunk in source.chunks(cancel_event):
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("Cancellation requested; stopping audio input.")
                    break
                chunk_count += 1
                progress.update(len(chunk))
                if self.recognizer.accept(chunk):
                    blob = self.recognizer.result()
                    self._append(blob, accumulator)
                    if on_result is not None:
                        text = extract_text(blob)
                        if text:
                            on_result(text)
        finally:
            progress.close()
        logger.info(f"Processed {chunk_count} audio chunks.")

    def _append(self, blob: str, accumulator: WordAccumulator) -> None:
        words = decode_result(blob)
        accumulator.append(words)
        logger.debug(f"Utterance finalized with {len(words)} words ({len(accumulator)} total).")

    def _finalize(self, accumulator: WordAccumulator, output_path: str) -> List[Cue]:
        self._append(self.recognizer.final_result(), accumulator)
        cues = segment_words(accumulator.words, self.max_words, self.max_duration)
        self.formatter.write_cues(cues, output_path)
        return cues
