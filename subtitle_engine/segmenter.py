"""Text segmentation: narration text into short, natural subtitle cues.

WHY: Narration arrives as long paragraphs, but a subtitle line must stay
readable at a glance (about 12 Chinese characters). Cutting at a fixed
width breaks words and sentences apart, so cues follow sentence
punctuation first and word boundaries second.

HOW: Four stages, all order-preserving:
  1. _split_by_endings() — split at sentence terminators, keeping the
     terminator on the preceding chunk; one long chunk is retried with
     clause separators (comma, enumeration comma, semicolon).
  2. Chunks within max_length are emitted unchanged.
  3. _split_long_sentence() — greedy accumulation of word tokens until
     the clean length would exceed max_length; an over-long single token
     is hard-split by _split_by_characters().
  4. _filter_segments() — drop empty cues and fold one-character (or
     punctuation-only) cues into a neighbour.

RULES:
- Lengths are clean lengths (see text.clean_len) — punctuation is free.
- Concatenating the cues reproduces the input, ignoring whitespace.
- Content is never dropped or reordered.
- A tokenizer failure degrades to per-character tokens, never an error.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .text import (
    BREAK_POINTS,
    DEFAULT_MAX_LENGTH,
    SECONDARY_ENDINGS,
    SENTENCE_ENDINGS,
    clean_len,
    clean_text,
)
from .tokenizers import CharacterTokenizer, WordTokenizer, create_tokenizer

logger = logging.getLogger(__name__)


class TextSegmenter:
    """Split narration text into subtitle cues.

    Args:
        max_length: Target maximum clean length per cue.
        tokenizer: Word tokenizer for long sentences. Defaults to
            create_tokenizer(): the shared jieba tokenizer, or per-character
            tokens when jieba cannot load.

    Raises:
        ValueError: If max_length is not a positive integer.
    """

    def __init__(
        self,
        max_length: int = DEFAULT_MAX_LENGTH,
        tokenizer: Optional[WordTokenizer] = None,
    ) -> None:
        if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
            raise ValueError(
                "max_length must be a positive integer, got {!r}".format(max_length)
            )
        self.max_length = max_length
        self.tokenizer = tokenizer if tokenizer is not None else create_tokenizer()

    def segment(self, text: str) -> List[str]:
        """Split text into ordered subtitle cues.

        Args:
            text: Narration text (may be empty).

        Returns:
            Cue texts in input order; empty list for empty input.
        """
        sentences = _split_by_endings(text, SENTENCE_ENDINGS)

        if len(sentences) == 1 and clean_len(sentences[0]) > self.max_length * 2:
            sentences = _split_by_endings(sentences[0], SECONDARY_ENDINGS)

        segments = []  # type: List[str]
        for sentence in sentences:
            if clean_len(sentence) <= self.max_length:
                segments.append(sentence)
            else:
                segments.extend(self._split_long_sentence(sentence))

        return _filter_segments(segments)

    # -------------------------------------------------------------------------
    # Long sentences
    # -------------------------------------------------------------------------

    def _split_long_sentence(self, sentence: str) -> List[str]:
        """Greedily pack word tokens into cues of at most max_length."""
        segments = []  # type: List[str]
        current = ""

        for word in self._tokenize(sentence):
            if not clean_text(word):
                # Punctuation and spaces ride along with the current cue
                current += word
                continue

            potential = current + word
            if clean_len(potential) <= self.max_length:
                current = potential
                continue

            if current:
                # The natural break point is computed but not yet used to
                # move the flush position; both outcomes flush here.
                best_break = self._find_best_break(clean_text(current))
                if best_break is not None:
                    segments.append(current)
                else:
                    segments.append(current)
            current = word

            if clean_len(current) > self.max_length:
                pieces = self._split_by_characters(current)
                segments.extend(pieces[:-1])
                current = pieces[-1]

        if current:
            segments.append(current)

        return segments

    def _tokenize(self, sentence: str) -> List[str]:
        try:
            return self.tokenizer.tokenize(sentence)
        except Exception:
            logger.warning(
                "%s tokenizer failed, using per-character tokens",
                self.tokenizer.name,
                exc_info=True,
            )
            return CharacterTokenizer().tokenize(sentence)

    def _find_best_break(
        self,
        text: str,
        break_points: Dict[str, int] = BREAK_POINTS,
    ) -> Optional[Tuple[str, str]]:
        """Find the most natural break in text, scanning backward.

        The search runs from max_length - 1 down to max_length // 2 and
        keeps the break point with the lowest priority number. The break
        falls after the matched character.

        Returns:
            (before, after) halves, or None when no break point is found.
        """
        best = None  # type: Optional[Tuple[str, str]]
        best_priority = 999

        search_start = min(self.max_length - 1, len(text) - 1)
        search_end = max(self.max_length // 2, 0)

        for i in range(search_start, search_end - 1, -1):
            priority = break_points.get(text[i])
            if priority is not None and priority < best_priority:
                best_priority = priority
                best = (text[:i + 1].strip(), text[i + 1:].strip())

        return best

    def _split_by_characters(self, text: str) -> List[str]:
        """Hard-split text into pieces of max_length characters."""
        if len(text) <= self.max_length:
            return [text]
        return [
            text[i:i + self.max_length]
            for i in range(0, len(text), self.max_length)
        ]


# =============================================================================
# Helpers
# =============================================================================

def _split_by_endings(text: str, endings: Sequence[str]) -> List[str]:
    """Split text after each ending character, trimming every chunk.

    Empty chunks are dropped; the trailing remainder is kept.
    """
    sentences = []  # type: List[str]
    current = []  # type: List[str]

    for char in text:
        current.append(char)
        if char in endings:
            chunk = "".join(current).strip()
            if chunk:
                sentences.append(chunk)
            current = []

    chunk = "".join(current).strip()
    if chunk:
        sentences.append(chunk)

    return sentences


def _filter_segments(segments: List[str]) -> List[str]:
    """Drop empty cues and merge one-character cues into a neighbour.

    A cue whose clean length is 0 or 1 is appended to the previous cue; at
    the start of the list it is carried forward and prefixed to the next
    cue. If nothing follows, it is kept on its own so no content is lost.
    """
    filtered = []  # type: List[str]
    carry = ""

    for seg in segments:
        seg = seg.strip()
        if not seg:
            continue

        seg = carry + seg
        carry = ""

        if clean_len(seg) <= 1:
            if filtered:
                filtered[-1] += seg
            else:
                carry = seg
        else:
            filtered.append(seg)

    if carry:
        filtered.append(carry)

    return filtered
