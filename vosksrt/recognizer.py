"""Handles speech recognition of raw PCM chunks using Vosk."""

import logging
import os
from abc import ABC, abstractmethod

import vosk

from .exceptions import RecognitionError

logger = logging.getLogger(__name__)

class Recognizer(ABC):
    """Abstract base class for streaming recognition engines."""

    @abstractmethod
    def accept(self, chunk: bytes) -> bool:
        """
        Feeds raw 16-bit mono PCM to the engine.

        Returns:
            True when an utterance boundary was reached and result() is ready.
        """
        pass

    @abstractmethod
    def result(self) -> str:
        """Returns the result blob of the utterance just finalized."""
        pass

    @abstractmethod
    def partial_result(self) -> str:
        """Returns the interim result blob of the utterance in progress."""
        pass

    @abstractmethod
    def final_result(self) -> str:
        """Flushes any buffered audio and returns its result blob."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Releases engine resources. Safe to call more than once."""
        pass


class VoskRecognizer(Recognizer):
    """Implements streaming recognition with a Vosk/Kaldi model."""

    def __init__(self, model_path: str, sample_rate: int = 16000, log_level: int = -1):
        """
        Loads the model and creates a recognizer with word timing enabled.

        Args:
            model_path: Directory holding an unpacked Vosk model.
            sample_rate: Sample rate of the audio that will be fed, in Hz.
            log_level: Kaldi log verbosity passed to vosk.SetLogLevel (-1 silences it).

        Raises:
            RecognitionError: If the model directory is missing or fails to load.
        """
        self.model_path = model_path
        self.sample_rate = sample_rate
        self._model = None
        self._recognizer = None

        if not os.path.isdir(model_path):
            raise RecognitionError(f"Vosk model directory not found: {model_path}")

        vosk.SetLogLevel(log_level)
        logger.info(f"Loading Vosk model from '{model_path}' at {sample_rate} Hz")
        try:
            self._model = vosk.Model(model_path)
            self._recognizer = vosk.KaldiRecognizer(self._model, float(sample_rate))
            self._recognizer.SetMaxAlternatives(0)
            self._recognizer.SetWords(True)
        except Exception as e:
            logger.error(f"Failed to load Vosk model '{model_path}': {e}", exc_info=True)
            self.close()
            raise RecognitionError(f"Failed to load Vosk model '{model_path}': {e}") from e
        logger.info("Vosk model loaded successfully.")

    def _require_open(self):
        if self._recognizer is None:
            raise RecognitionError("Recognizer has already been closed.")
        return self._recognizer

    def accept(self, chunk: bytes) -> bool:
        return bool(self._require_open().AcceptWaveform(bytes(chunk)))

    def result(self) -> str:
        return self._require_open().Result()

    def partial_result(self) -> str:
        return self._require_open().PartialResult()

    def final_result(self) -> str:
        return self._require_open().FinalResult()

    def close(self) -> None:
        if self._recognizer is not None or self._model is not None:
            logger.debug("Releasing Vosk recognizer and model.")
        self._recognizer = None
        self._model = None
