"""Groups accumulated words into subtitle cues."""

import logging
from typing import List, Sequence

from .models import Cue, WordEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORDS = 6
DEFAULT_MAX_DURATION = 4.0


def segment_words(
    words: Sequence[WordEntry],
    max_words: int = DEFAULT_MAX_WORDS,
    max_duration: float = DEFAULT_MAX_DURATION
) -> List[Cue]:
    """
    Partitions words into cues with greedy forward grouping.

    A cue opens at the first unconsumed word and takes further words while it
    holds fewer than max_words and the candidate word ends no later than
    max_duration seconds after the cue's start. The opening word is always
    taken, so a single over-long word still forms its own cue.

    Words are expected in temporal order and are never reordered.

    Args:
        words: The session's words, in recognition order.
        max_words: Maximum number of words in one cue.
        max_duration: Maximum span of a multi-word cue, in seconds.

    Returns:
        Cues numbered from 1, covering every word exactly once.

    Raises:
        ValueError: If max_words is below 1 or max_duration is not positive.
    """
    if max_words < 1:
        raise ValueError(f"max_words must be at least 1, got {max_words}")
    if max_duration <= 0:
        raise ValueError(f"max_duration must be positive, got {max_duration}")

    cues = []
    i = 0
    total = len(words)
    while i < total:
        cue_start = words[i].start
        j = i + 1
        while j < total and j - i < max_words and words[j].end - cue_start <= max_duration:
            j += 1
        group = words[i:j]
        cues.append(Cue(
            index=len(cues) + 1,
            start=cue_start,
            end=group[-1].end,
            text=" ".join(word.text for word in group)
        ))
        i = j

    logger.debug(f"Segmented {total} words into {len(cues)} cues (max_words={max_words}, max_duration={max_duration}s)")
    return cues
