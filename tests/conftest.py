"""Shared fakes and fixtures for the vosksrt test suite."""

import json
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import pytest

from vosksrt.audio_source import AudioSource
from vosksrt.recognizer import Recognizer


def vosk_blob(words: Sequence[Tuple[float, float, str]], text: Optional[str] = None) -> str:
    """Builds a result blob shaped like Vosk's Result()/FinalResult() output."""
    result = [{"conf": 1.0, "end": end, "start": start, "word": word} for start, end, word in words]
    document = {"text": text if text is not None else " ".join(w for _, _, w in words)}
    if result:
        document["result"] = result
    return json.dumps(document)


SCENARIO_WORDS = [
    (0.0, 0.3, "hello"),
    (0.4, 0.8, "world"),
    (0.9, 1.2, "foo"),
    (1.3, 1.6, "bar"),
    (1.7, 2.0, "baz"),
    (2.1, 2.4, "qux"),
    (2.5, 2.8, "extra"),
]


class FakeRecognizer(Recognizer):
    """Scripted recognizer: finalizes an utterance on chosen chunk numbers."""

    def __init__(self, results: Optional[dict] = None, final: str = '{"text": ""}'):
        # results maps the 1-based chunk number to the blob returned after it
        self.results = results or {}
        self.final = final
        self.fed: List[bytes] = []
        self.close_calls = 0
        self.final_calls = 0
        self._pending = None

    def accept(self, chunk: bytes) -> bool:
        self.fed.append(chunk)
        self._pending = self.results.get(len(self.fed))
        return self._pending is not None

    def result(self) -> str:
        return self._pending

    def partial_result(self) -> str:
        return '{"partial": ""}'

    def final_result(self) -> str:
        self.final_calls += 1
        return self.final

    def close(self) -> None:
        self.close_calls += 1


class ListSource(AudioSource):
    """Finite in-memory chunk source that records its lifecycle."""

    def __init__(self, chunks: Sequence[bytes], total_bytes: Optional[int] = None,
                 fail_open: Exception = None, fail_close: Exception = None):
        self._chunks = list(chunks)
        self.total_bytes = total_bytes
        self.fail_open = fail_open
        self.fail_close = fail_close
        self.open_calls = 0
        self.close_calls = 0

    def open(self) -> None:
        self.open_calls += 1
        if self.fail_open is not None:
            raise self.fail_open

    def chunks(self, cancel_event=None) -> Iterator[bytes]:
        yield from self._chunks

    def close(self) -> None:
        self.close_calls += 1
        if self.fail_close is not None:
            raise self.fail_close


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() rewires the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
