"""Configuration constants and .env loading.

WHY: Centralizes the few tunable values of the subtitle pipeline so they
are easy to find, update, and override per deployment without touching
code. The subtitle engine itself never reads the environment; this module
is the only place that does.

HOW: python-dotenv loads the .env file on import. Constants are
module-level strings and ints. load_max_length() validates the cue length
override and raises a clear error when it is unusable.

RULES:
- SUBTITLE_MAX_LENGTH overrides the default maximum cue length (12)
- SUBTITLE_DEFAULT_TITLE overrides the title used when a job has no chapter
- SUBTITLE_JIEBA_DICT names a custom jieba dictionary file (optional)
- Output files are named {narration_id}{SUBTITLE_FILE_SUFFIX}
- Invalid overrides raise ValueError, never fall back silently
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

from subtitle_engine import DEFAULT_MAX_LENGTH, DEFAULT_TITLE

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------

SUBTITLE_FORMAT = "ass"
SUBTITLE_FILE_SUFFIX = "_subtitle.ass"
SUBTITLE_MEDIA_TYPE = "text/x-ass"

CHAPTER_TITLE_TEMPLATE = "Chapter {} Narration Subtitle"
"""Script title for subtitles of a known chapter."""

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_SUBTITLE_TITLE = os.getenv("SUBTITLE_DEFAULT_TITLE", DEFAULT_TITLE)


def load_max_length() -> int:
    """Load the maximum cue length from the environment.

    WHY: Vertical and horizontal videos fit different line widths; the
    cue length is the one knob the engine exposes.

    HOW: Reads SUBTITLE_MAX_LENGTH (populated by python-dotenv), falling
    back to the engine default of 12.

    RULES:
    - Unset or empty → DEFAULT_MAX_LENGTH
    - Non-integer or non-positive values raise ValueError
    """
    raw = os.getenv("SUBTITLE_MAX_LENGTH", "").strip()
    if not raw:
        return DEFAULT_MAX_LENGTH
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            "SUBTITLE_MAX_LENGTH must be an integer, got {!r}".format(raw)
        ) from None
    if value <= 0:
        raise ValueError(
            "SUBTITLE_MAX_LENGTH must be positive, got {}".format(value)
        )
    return value


def load_jieba_dictionary() -> Optional[str]:
    """Load the custom jieba dictionary path from the environment.

    WHY: Novels use character names and invented terms that jieba's
    bundled dictionary splits apart. A project dictionary keeps them in
    one cue.

    RULES:
    - Unset or empty SUBTITLE_JIEBA_DICT → None (jieba's bundled dictionary)
    - A path that is not an existing file raises ValueError
    """
    raw = os.getenv("SUBTITLE_JIEBA_DICT", "").strip()
    if not raw:
        return None
    if not os.path.isfile(raw):
        raise ValueError(
            "SUBTITLE_JIEBA_DICT must point to an existing file, got {!r}".format(raw)
        )
    return raw
