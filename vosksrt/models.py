"""Data models for vosksrt."""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

@dataclass(frozen=True)
class WordEntry:
    """A single recognized word with its timing, in seconds."""
    start: float
    end: float
    text: str

@dataclass(frozen=True)
class Cue:
    """One subtitle block built from a contiguous run of words."""
    index: int
    start: float
    end: float
    text: str

@dataclass
class WordAccumulator:
    """
    Append-only sequence of every word recognized during a session.

    Words are kept exactly as received: no sorting and no deduplication.
    """
    _words: List[WordEntry] = field(default_factory=list)

    def append(self, entries: Iterable[WordEntry]) -> None:
        self._words.extend(entries)

    @property
    def words(self) -> Tuple[WordEntry, ...]:
        return tuple(self._words)

    def __len__(self) -> int:
        return len(self._words)
