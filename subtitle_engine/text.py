"""Punctuation set, clean-text helpers and timing constants.

WHY: Narration text, cue boundaries and TTS timestamps are three lossy
views of the same text. They only agree once punctuation and whitespace
are removed, so every length budget and every alignment search key is
computed on the "clean" form. Keeping the punctuation set in one place
guarantees the segmenter and the aligner strip exactly the same
characters.

HOW: PUNCTUATION is a frozenset of single characters (CJK full-width
marks, quotation/bracket marks, ASCII punctuation). clean_text() drops
whitespace and every PUNCTUATION member; clean_len() counts what is left
in code points.

RULES:
- Punctuation contributes to rendered text, never to lengths or matching.
- Lengths are counted in characters, not bytes.
- Constants are frozen — never mutate them at runtime.
- Python 3.9.6 compatible (no X | Y unions, no match/case).
"""

import re
from typing import Dict, FrozenSet, Tuple

# =============================================================================
# Punctuation
# =============================================================================

PUNCTUATION: FrozenSet[str] = frozenset(
    # CJK sentence and clause marks
    "，。；：、！？"
    # Quotation and bracket marks (straight and curly quotes included)
    "\"'“”‘’"
    "（）【】《》〈〉「」『』〔〕［］｛｝｜"
    "～·…—–"
    # ASCII punctuation
    ",.;:!?()[]{}|~`@#$%^&*+=<>/\\-"
)

# TTS engines emit this token for breaths and pauses; it carries timing
# but no narration text.
PAUSE_MARKERS: FrozenSet[str] = frozenset({"pau"})

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile("[{}]".format(re.escape("".join(sorted(PUNCTUATION)))))

# =============================================================================
# Segmentation constants
# =============================================================================

DEFAULT_MAX_LENGTH = 12

# Primary sentence terminators, checked in this order.
SENTENCE_ENDINGS: Tuple[str, ...] = ("。", "！", "？", "；", "…", "：")

# Used when the primary split leaves one long chunk.
SECONDARY_ENDINGS: Tuple[str, ...] = ("，", "、", "；")

# Natural break points inside a long sentence (lower = more natural).
BREAK_POINTS: Dict[str, int] = {
    "，": 1,
    "、": 2,
    "；": 3,
    "：": 4,
    "的": 5,
    "了": 6,
    "着": 7,
    "过": 8,
    "与": 9,
    "和": 10,
    "或": 11,
    "但": 12,
    "而": 13,
    "却": 14,
    "则": 15,
}

# =============================================================================
# Timing constants (seconds)
# =============================================================================

CUE_GAP = 0.1
SECONDS_PER_CHAR = 0.3
MIN_CUE_DURATION = 0.5
FALLBACK_CUE_DURATION = 1.0


def clean_text(text: str) -> str:
    """Remove all whitespace and punctuation from text."""
    return _PUNCTUATION_RE.sub("", _WHITESPACE_RE.sub("", text))


def clean_len(text: str) -> int:
    """Return the punctuation-stripped length of text, in characters."""
    return len(clean_text(text))


def is_punctuation(character: str) -> bool:
    """True if a timestamp character contributes nothing to the clean text.

    Covers punctuation, whitespace (including newlines emitted by the TTS
    engine) and pause markers.
    """
    if character in PAUSE_MARKERS:
        return True
    return clean_text(character) == ""
