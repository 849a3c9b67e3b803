"""Subtitle engine: narration text + TTS character timestamps → ASS subtitles.

WHY: Narrated chapter videos need subtitles that follow the synthesized
voice exactly. The TTS engine reports when each character is spoken, but
subtitle cues must be short, break at natural points, and never overlap.
This package turns the two inputs into a finished ASS document without
any I/O or global state, so one call per chapter can run concurrently.

HOW: build_subtitles(text, timestamps) runs three components in order:
  TextSegmenter     — narration text → short cue texts
  TimestampAligner  — cue texts + timestamps → TimedCue list
  SubtitleRenderer  — TimedCue list → ASS content
and returns the content together with the aligned cues. generate_ass()
is the same call when only the file content is needed.

RULES:
- build_subtitles() / generate_ass() are the entry points for producing a
  subtitle file; callers never wire the three components themselves.
- timestamps must already be offset-adjusted into one timeline
  (see models.offset_timestamps for multi-clip input).
- max_length is the only tunable; the library never reads the environment.
- Malformed timing degrades to estimated timing, never an exception.
- Python 3.9.6 compatible (no slots=True, no match/case, no X | Y unions).
"""

from typing import Optional, Sequence

from .aligner import CleanProjection, TimestampAligner
from .models import (
    CharacterTimestamp,
    Clip,
    SubtitleDocument,
    TimedCue,
    offset_timestamps,
)
from .renderer import DEFAULT_TITLE, SubtitleRenderer, format_ass_time
from .segmenter import TextSegmenter
from .text import DEFAULT_MAX_LENGTH, PUNCTUATION, clean_len, clean_text
from .tokenizers import (
    CharacterTokenizer,
    JiebaTokenizer,
    WordTokenizer,
    create_tokenizer,
)

__all__ = [
    "build_subtitles",
    "generate_ass",
    "CharacterTimestamp",
    "Clip",
    "TimedCue",
    "SubtitleDocument",
    "offset_timestamps",
    "TextSegmenter",
    "TimestampAligner",
    "CleanProjection",
    "SubtitleRenderer",
    "WordTokenizer",
    "JiebaTokenizer",
    "CharacterTokenizer",
    "create_tokenizer",
    "format_ass_time",
    "clean_text",
    "clean_len",
    "PUNCTUATION",
    "DEFAULT_MAX_LENGTH",
    "DEFAULT_TITLE",
]


def build_subtitles(
    text: str,
    timestamps: Sequence[CharacterTimestamp],
    title: str = "",
    max_length: int = DEFAULT_MAX_LENGTH,
    tokenizer: Optional[WordTokenizer] = None,
) -> SubtitleDocument:
    """Build an ASS subtitle document from narration text and timestamps.

    WHY: Callers (the chapter pipeline, CLI, tests) should not wire the
    three components themselves, but some of them need the cues as well
    as the file (cue counts, reporting).

    HOW: segment → align → render, each step on fresh objects. The
    default tokenizer is shared between calls (see create_tokenizer).

    RULES:
    - Empty text produces a header-only document with no cues.
    - Empty timestamps produce estimated timing for every cue.
    - Thread-safe: the only object shared between calls is the tokenizer,
      which is only read.

    Args:
        text: Full narration text the timestamps were synthesized from.
        timestamps: Document-relative character timestamps.
        title: ASS script title. Empty means "Generated Subtitle".
        max_length: Maximum punctuation-stripped characters per cue.
        tokenizer: Optional word tokenizer (defaults to jieba with fallback).

    Returns:
        SubtitleDocument with the ASS content and its aligned cues.

    Raises:
        ValueError: If max_length is not a positive integer.
    """
    segmenter = TextSegmenter(max_length=max_length, tokenizer=tokenizer)
    cues = segmenter.segment(text)
    timed = TimestampAligner().align(cues, timestamps, text)
    content = SubtitleRenderer().render(timed, title)
    return SubtitleDocument(content=content, cues=tuple(timed))


def generate_ass(
    text: str,
    timestamps: Sequence[CharacterTimestamp],
    title: str = "",
    max_length: int = DEFAULT_MAX_LENGTH,
    tokenizer: Optional[WordTokenizer] = None,
) -> str:
    """Return only the ASS file content of build_subtitles()."""
    return build_subtitles(
        text,
        timestamps,
        title=title,
        max_length=max_length,
        tokenizer=tokenizer,
    ).content
