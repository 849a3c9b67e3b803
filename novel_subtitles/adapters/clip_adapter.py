"""Adapter: narration clips to one engine timeline.

WHY: A chapter narration is synthesized in several TTS calls. Each clip
reports timestamps relative to its own audio, but the subtitle engine
needs one document-relative timestamp sequence and the matching full
text. The final video concatenates the clip audio back to back, so a
clip's timestamps are shifted by the total duration of the clips before
it.

HOW: Clips are ordered by sequence, converted to engine Clip objects, and
joined with subtitle_engine.offset_timestamps(). The text of every clip
that carries timestamps is concatenated in the same order.

RULES:
- Input models are never modified.
- A clip without timestamps is skipped (logged), but its duration still
  advances the offset so later clips stay in sync with the audio.
- Skipped clips contribute no text: the text must match the timestamps.
- Texts are joined with no separator.
- Python 3.9.6 compatible — no slots, no match/case, no X | Y unions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from subtitle_engine import CharacterTimestamp, Clip, offset_timestamps

from novel_subtitles.models import NarrationClip

logger = logging.getLogger(__name__)


@dataclass
class MergedNarration:
    """Full narration text and timeline assembled from clips.

    Attributes:
        text: Concatenated text of the clips that carry timestamps.
        timestamps: Offset-adjusted timestamps for text.
        duration: Total audio duration of all clips, skipped ones included.
        skipped: Sequence numbers of clips that had no timestamps.
    """

    text: str
    timestamps: List[CharacterTimestamp]
    duration: float
    skipped: List[int] = field(default_factory=list)


def merge_clips(clips: Sequence[NarrationClip]) -> MergedNarration:
    """Merge narration clips into one text and one timestamp sequence.

    Args:
        clips: Clips of one narration, in any order.

    Returns:
        MergedNarration ready for subtitle_engine.build_subtitles().
    """
    ordered = sorted(clips, key=lambda c: c.sequence)

    engine_clips: List[Clip] = []
    texts: List[str] = []
    skipped: List[int] = []

    for clip in ordered:
        if not clip.timestamps:
            logger.warning(
                "Clip %d has no timestamps, skipping (offset still advances by %.2fs)",
                clip.sequence,
                clip.duration,
            )
            skipped.append(clip.sequence)
        else:
            texts.append(clip.text)

        engine_clips.append(Clip(
            timestamps=[ts.to_engine() for ts in clip.timestamps],
            duration=clip.duration,
        ))

    return MergedNarration(
        text="".join(texts),
        timestamps=offset_timestamps(engine_clips),
        duration=sum(c.duration for c in engine_clips),
        skipped=skipped,
    )
