"""Audio chunk sources: decoded files through ffmpeg and live microphone capture."""

import logging
import os
import threading
import time
from abc import ABC, abstractmethod
from typing import Iterator, Optional

import ffmpeg

from .exceptions import AudioSourceError

logger = logging.getLogger(__name__)

SAMPLE_WIDTH = 2 # bytes per 16-bit sample
READ_RETRY_DELAY = 0.05 # seconds to wait after a failed capture read

def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()

class AudioSource(ABC):
    """
    A sequential source of raw mono 16-bit PCM chunks.

    Sources are opened once, iterated once via chunks() and closed once.
    They also work as context managers.
    """

    total_bytes: Optional[int] = None

    @abstractmethod
    def open(self) -> None:
        """
        Acquires the underlying decoder or device.

        Raises:
            AudioSourceError: If the source cannot be opened.
        """
        pass

    @abstractmethod
    def chunks(self, cancel_event: Optional[threading.Event] = None) -> Iterator[bytes]:
        """
        Yields PCM chunks in arrival order until the source is exhausted.

        cancel_event is checked before every read, so a set event ends the
        iteration even while the underlying reads keep failing.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Releases the underlying decoder or device. Safe to call more than once."""
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False


class FileAudioSource(AudioSource):
    """Decodes any ffmpeg-readable file to 16 kHz mono s16le and reads it in fixed-size chunks."""

    def __init__(self, input_path: str, sample_rate: int = 16000, chunk_size: int = 4096, ffmpeg_path: Optional[str] = None):
        """
        Args:
            input_path: Path to the audio (or video) file.
            sample_rate: Output sample rate requested from ffmpeg, in Hz.
            chunk_size: Number of bytes per chunk.
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
        """
        if chunk_size <= 0 or chunk_size % SAMPLE_WIDTH:
            raise ValueError(f"chunk_size must be a positive multiple of {SAMPLE_WIDTH}, got {chunk_size}")
        self.input_path = input_path
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        ffmpeg_dir = os.path.dirname(ffmpeg_path) if ffmpeg_path else ''
        self.ffprobe_cmd = os.path.join(ffmpeg_dir, 'ffprobe') if ffmpeg_dir else 'ffprobe'
        self._process = None
        self.total_bytes = None

    def _estimate_total_bytes(self) -> Optional[int]:
        """Best-effort size of the decoded stream, used only for progress display."""
        try:
            info = ffmpeg.probe(self.input_path, cmd=self.ffprobe_cmd)
            duration = float(info['format']['duration'])
        except (ffmpeg.Error, OSError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Could not probe duration of {self.input_path}: {e}")
            return None
        return int(duration * self.sample_rate) * SAMPLE_WIDTH

    def open(self) -> None:
        logger.info(f"Opening audio file for decoding: {self.input_path}")
        if not os.path.isfile(self.input_path):
            raise AudioSourceError(f"Input audio file not found or is not a file: {self.input_path}")

        self.total_bytes = self._estimate_total_bytes()
        try:
            self._process = (
                ffmpeg
                .input(self.input_path)
                .output('pipe:', format='s16le', acodec='pcm_s16le', ac=1, ar=self.sample_rate)
                .global_args('-loglevel', 'error', '-nostdin')
                .run_async(cmd=self.ffmpeg_cmd, pipe_stdout=True, pipe_stderr=True)
            )
        except OSError as e:
            logger.error(f"Could not start ffmpeg ('{self.ffmpeg_cmd}'): {e}")
            raise AudioSourceError(f"Could not start ffmpeg ('{self.ffmpeg_cmd}'): {e}") from e
        logger.debug(f"ffmpeg decoding {self.input_path} to {self.sample_rate} Hz mono s16le")

    def chunks(self, cancel_event: Optional[threading.Event] = None) -> Iterator[bytes]:
        if self._process is None:
            raise AudioSourceError("Audio source has not been opened.")
        while True:
            if _cancelled(cancel_event):
                return
            try:
                chunk = self._process.stdout.read(self.chunk_size)
            except (OSError, ValueError) as e:
                # Read failure ends the stream like EOF does
                logger.warning(f"Error reading decoded audio from ffmpeg: {e}. Treating as end of stream.")
                return
            if not chunk:
                break
            yield chunk
        self._check_exit_status()

    def _check_exit_status(self) -> None:
        returncode = self._process.wait()
        if returncode != 0:
            stderr_output = self._process.stderr.read() if self._process.stderr else b""
            stderr_text = stderr_output.decode('utf-8', errors='replace').strip() or "No stderr output"
            logger.warning(f"ffmpeg exited with status {returncode} while decoding {self.input_path}: {stderr_text}")

    def close(self) -> None:
        process, self._process = self._process, None
        if process is None:
            return
        if process.poll() is None:
            logger.debug("Terminating ffmpeg decoder before end of stream.")
            process.kill()
        for pipe in (process.stdout, process.stderr):
            if pipe is not None:
                pipe.close()
        process.wait()


class MicrophoneSource(AudioSource):
    """Captures 16-bit mono audio from the default input device. Never runs dry on its own."""

    def __init__(self, sample_rate: int = 16000, frames_per_buffer: int = 4096, device=None):
        """
        Args:
            sample_rate: Capture rate in Hz.
            frames_per_buffer: Frames requested per blocking read.
            device: sounddevice device id or name; None for the default input.
        """
        if frames_per_buffer <= 0:
            raise ValueError(f"frames_per_buffer must be positive, got {frames_per_buffer}")
        self.sample_rate = sample_rate
        self.frames_per_buffer = frames_per_buffer
        self.device = device
        self._sd = None
        self._stream = None

    def open(self) -> None:
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise AudioSourceError(f"sounddevice (PortAudio) is not available: {e}") from e
        self._sd = sd

        try:
            device_info = sd.query_devices(self.device, kind='input')
            logger.info(f"Opening input device '{device_info['name']}' at {self.sample_rate} Hz mono int16")
            stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                channels=1,
                dtype='int16',
                blocksize=self.frames_per_buffer,
                device=self.device
            )
        except (sd.PortAudioError, ValueError) as e:
            logger.error(f"Could not open audio input device: {e}")
            raise AudioSourceError(f"Could not open audio input device: {e}") from e

        try:
            stream.start()
        except sd.PortAudioError as e:
            stream.close()
            logger.error(f"Could not start audio input stream: {e}")
            raise AudioSourceError(f"Could not start audio input stream: {e}") from e
        self._stream = stream

    def chunks(self, cancel_event: Optional[threading.Event] = None) -> Iterator[bytes]:
        if self._stream is None:
            raise AudioSourceError("Audio source has not been opened.")
        while not _cancelled(cancel_event):
            try:
                data, overflowed = self._stream.read(self.frames_per_buffer)
            except self._sd.PortAudioError as e:
                logger.debug(f"Audio input read failed, skipping frame: {e}")
                time.sleep(READ_RETRY_DELAY)
                continue
            if overflowed:
                logger.debug("Audio input overflow; some samples were dropped.")
            yield bytes(data)

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        except self._sd.PortAudioError as e:
            logger.warning(f"Could not stop audio input stream cleanly: {e}")
        finally:
            stream.close()
