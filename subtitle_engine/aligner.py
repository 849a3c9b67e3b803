"""Timestamp alignment: map subtitle cues onto TTS character timings.

WHY: The segmenter decides *what* each cue says; the TTS engine knows
*when* each character is spoken. The two only line up after punctuation
is removed from both sides, and they can still drift (the TTS engine may
normalize numbers or skip characters). The aligner must produce a strictly
ordered, non-overlapping cue track even when matching fails.

HOW: Three steps:
  1. CleanProjection — one pass over the timestamps builds the clean
     string and a clean-index → timestamp-index map.
  2. Forward matching — each cue's clean text is searched in the clean
     string from a cursor that only moves forward. A match takes the start
     time of its first character and the end time of its last; a miss
     falls back to an estimate (0.3s per character after a 0.1s gap).
     A local guard pushes a cue that starts before the previous cue ends.
  3. _fix_overlaps() — a second, independent pass over the whole track
     that removes any remaining overlap and enforces positive durations.

RULES:
- Never raises on missing or drifting timing data — estimates instead.
- The cursor is loop-local and never moves backward.
- Output satisfies: start < end, end_i <= start_{i+1}, all finite.
- Both the local guard and the global pass always run.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .models import CharacterTimestamp, TimedCue
from .text import (
    CUE_GAP,
    FALLBACK_CUE_DURATION,
    MIN_CUE_DURATION,
    SECONDS_PER_CHAR,
    clean_len,
    clean_text,
    is_punctuation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanProjection:
    """Punctuation-free view of a timestamp sequence.

    Attributes:
        text: Concatenation of the surviving characters, in order.
        index_map: index_map[i] is the timestamp index of text[i].
    """
    text: str
    index_map: Tuple[int, ...]

    @classmethod
    def from_timestamps(cls, timestamps: Sequence[CharacterTimestamp]) -> "CleanProjection":
        chars = []  # type: List[str]
        index_map = []  # type: List[int]
        for i, ts in enumerate(timestamps):
            if is_punctuation(ts.character):
                continue
            # A multi-character entry maps every surviving character to itself
            for char in clean_text(ts.character):
                chars.append(char)
                index_map.append(i)
        return cls(text="".join(chars), index_map=tuple(index_map))

    def find(self, clean_cue: str, cursor: int) -> Optional[Tuple[int, int]]:
        """Return inclusive (start, end) clean indices of clean_cue at or after cursor."""
        if not clean_cue:
            return None
        start = self.text.find(clean_cue, cursor)
        if start < 0:
            return None
        return start, start + len(clean_cue) - 1


class TimestampAligner:
    """Assign start/end times to subtitle cues."""

    def align(
        self,
        cues: Sequence[str],
        timestamps: Sequence[CharacterTimestamp],
        full_text: str = "",
    ) -> List[TimedCue]:
        """Align cues against document-relative character timestamps.

        Args:
            cues: Cue texts from TextSegmenter, in order.
            timestamps: Offset-adjusted timestamps for the whole narration.
            full_text: The narration the timestamps were generated from.
                Matching runs on the timestamps themselves, so this is only
                used for diagnostics.

        Returns:
            TimedCue list with the same length and order as cues.
        """
        projection = CleanProjection.from_timestamps(timestamps)
        if full_text and clean_text(full_text) != projection.text:
            logger.debug(
                "Narration text and timestamps differ after cleaning "
                "(%d vs %d characters)",
                clean_len(full_text),
                len(projection.text),
            )

        timed = []  # type: List[TimedCue]
        cursor = 0

        for cue in cues:
            clean_cue = clean_text(cue)
            previous = timed[-1] if timed else None

            match = projection.find(clean_cue, cursor)
            if match is not None:
                first = projection.index_map[match[0]]
                last = projection.index_map[match[1]]
                start = timestamps[first].start_time
                end = timestamps[last].end_time
                cursor = match[1] + 1
            else:
                start = previous.end_time + CUE_GAP if previous else 0.0
                end = start + len(clean_cue) * SECONDS_PER_CHAR
                logger.debug("No timestamp match for cue %r, estimating %.2f-%.2f", cue, start, end)

            start, end = _fix_cue_overlap(start, end, previous, clean_cue)
            timed.append(TimedCue(text=cue, start_time=start, end_time=end))

        return _fix_overlaps(timed)


def _fix_cue_overlap(
    start: float,
    end: float,
    previous: Optional[TimedCue],
    clean_cue: str,
) -> Tuple[float, float]:
    """Push a cue that starts before the previous cue ends."""
    if previous is None:
        return start, end

    estimated = len(clean_cue) * SECONDS_PER_CHAR
    if start < previous.end_time:
        start = previous.end_time + CUE_GAP
        if start >= end:
            end = start + estimated
    elif end <= start:
        end = start + estimated

    return start, end


def _fix_overlaps(cues: List[TimedCue]) -> List[TimedCue]:
    """Final pass: remove overlaps and guarantee positive durations.

    A cue that starts before its predecessor ends is moved to
    previous end + 0.1s. It keeps its duration, but a duration under 0.5s
    becomes max(0.5, 0.3s per clean character).
    """
    fixed = []  # type: List[TimedCue]

    for cue in cues:
        start, end = cue.start_time, cue.end_time

        if fixed and start < fixed[-1].end_time:
            duration = cue.duration
            if duration < MIN_CUE_DURATION:
                duration = max(MIN_CUE_DURATION, clean_len(cue.text) * SECONDS_PER_CHAR)
            start = fixed[-1].end_time + CUE_GAP
            end = start + duration

        if start >= end:
            end = start + FALLBACK_CUE_DURATION

        fixed.append(TimedCue(text=cue.text, start_time=start, end_time=end))

    return fixed
