"""Novel narration subtitles — chapter narration audio to ASS subtitles.

WHY: Narrated chapter videos are voiced clip by clip with a TTS engine.
The subtitle step has to stitch those clips back into one timeline and
produce a subtitle file that follows the voice exactly.

HOW: Three-stage pipeline — validate (pydantic job models), merge
(clip adapter with running time offsets), generate (subtitle_engine).
Each stage is independently testable.

RULES:
- The subtitle_engine package holds all segmentation/timing logic
- This package owns configuration, logging setup and the CLI
- Inputs are never modified
"""

__version__ = "0.1.0"
