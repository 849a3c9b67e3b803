"""Adapters between stored narration records and the subtitle engine.

WHY: The engine consumes one document timeline; narration records arrive
as separate TTS clips. Adapters keep that translation out of the engine.

RULES:
- Adapters never modify their inputs
- Each adapter is a pure function with no I/O
"""

from novel_subtitles.adapters.clip_adapter import MergedNarration, merge_clips

__all__ = ["MergedNarration", "merge_clips"]
