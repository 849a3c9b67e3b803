"""Data models for the subtitle engine.

WHY: The engine reconciles character-level TTS timestamps with cue text
produced by the segmenter. Both ends need a small, well-typed vocabulary:
the timestamp entries coming in, the clips they arrive in, and the timed
cues going out.

HOW: Four dataclasses plus one helper:
  CharacterTimestamp — one synthesized character with its start/end time
  Clip               — one TTS invocation: its timestamps plus a duration
  TimedCue           — one aligned subtitle cue, ready for rendering
  SubtitleDocument   — rendered ASS content with the cues it contains
  offset_timestamps  — joins clips into a single document timeline

A cue produced by the segmenter (TextCue) is a plain string; its position
in the returned list is its order.

RULES:
- Times are float seconds.
- CharacterTimestamp and TimedCue are frozen — create new ones, never mutate.
- Clip timestamps are clip-local; only offset_timestamps() shifts them.
- Python 3.9.6 compatible (no slots=True, no match/case, no X | Y unions).
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class CharacterTimestamp:
    """A single synthesized character with timing.

    Attributes:
        character: One grapheme of the synthesized text (may be punctuation).
        start_time: Start time in seconds.
        end_time: End time in seconds.
    """
    character: str
    start_time: float
    end_time: float


@dataclass
class Clip:
    """The output of one TTS invocation for a slice of the narration.

    Attributes:
        timestamps: Clip-local character timestamps, in text order.
        duration: Audio duration of the clip in seconds.
    """
    timestamps: List[CharacterTimestamp] = field(default_factory=list)
    duration: float = 0.0


@dataclass(frozen=True)
class TimedCue:
    """A subtitle cue with its display interval.

    Attributes:
        text: Cue text as it will be rendered (punctuation kept).
        start_time: Display start in seconds.
        end_time: Display end in seconds.
    """
    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class SubtitleDocument:
    """A rendered subtitle file and the cues it was rendered from.

    Attributes:
        content: Complete ASS file content.
        cues: Aligned cues, one per Dialogue line, in display order.
    """
    content: str
    cues: Tuple[TimedCue, ...]


def offset_timestamps(clips: Iterable[Clip]) -> List[CharacterTimestamp]:
    """Concatenate clips into one document-relative timestamp sequence.

    Each clip's timestamps are shifted by the summed duration of all
    preceding clips. A clip without timestamps still advances the offset.
    """
    merged = []  # type: List[CharacterTimestamp]
    offset = 0.0
    for clip in clips:
        for ts in clip.timestamps:
            merged.append(CharacterTimestamp(
                character=ts.character,
                start_time=ts.start_time + offset,
                end_time=ts.end_time + offset,
            ))
        offset += clip.duration
    return merged
