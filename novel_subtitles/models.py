"""Pydantic models for subtitle job input.

WHY: Narration text and TTS timestamps arrive as JSON written by other
services (the narration generator and the TTS step). Validating that JSON
at the boundary keeps malformed numbers (NaN, negative times) out of the
engine, whose output invariants assume finite times.

HOW: Three models mirror the stored records: a timestamp entry, one
narration clip (the text it voiced, its audio duration and timestamps),
and the job that groups a narration's clips. to_engine() converts to the
engine's dataclasses.

RULES:
- All models use Field(description=...) so the JSON Schema is self-documenting
- Times are float seconds, finite and non-negative
- Clip timestamps are clip-local; merging happens in adapters.clip_adapter
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from subtitle_engine import CharacterTimestamp


class TimestampModel(BaseModel):
    """One character timestamp reported by the TTS engine."""

    character: str = Field(..., description="Synthesized character (may be punctuation)")
    start_time: float = Field(..., ge=0, allow_inf_nan=False, description="Start time in seconds")
    end_time: float = Field(..., ge=0, allow_inf_nan=False, description="End time in seconds")

    def to_engine(self) -> CharacterTimestamp:
        return CharacterTimestamp(
            character=self.character,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class NarrationClip(BaseModel):
    """One TTS audio record and the narration text it voiced.

    WHY: Narration is synthesized in several calls (one per paragraph),
    each with its own clip-local timeline.

    RULES:
    - sequence orders clips within a narration (ties keep file order)
    - duration is the audio length and drives the offset of later clips
    - timestamps may be empty when the TTS engine returned none
    """

    sequence: int = Field(0, description="Position of the clip within the narration")
    text: str = Field("", description="Narration text voiced by this clip")
    duration: float = Field(..., ge=0, allow_inf_nan=False, description="Audio duration in seconds")
    timestamps: List[TimestampModel] = Field(
        default_factory=list,
        description="Clip-local character timestamps in text order",
    )


class NarrationJob(BaseModel):
    """A subtitle request for one chapter narration."""

    narration_id: str = Field(..., min_length=1, description="Narration identifier, used in the file name")
    chapter_title: Optional[str] = Field(None, description="Chapter title for the script title")
    clips: List[NarrationClip] = Field(default_factory=list, description="TTS clips of the narration")
