"""Subtitle generation pipeline for one chapter narration.

WHY: The CLI (and any other caller) needs one function that turns a
validated NarrationJob into a finished subtitle file: merge clips, choose
a title, run the engine, and describe what was produced. Failure
conditions the engine deliberately leaves to its caller (no audio, no
timestamps, nothing to show) are decided here.

HOW: merge_clips() builds the timeline, then subtitle_engine's
build_subtitles() segments, aligns and renders it and returns the cues
alongside the content (so the cue count is known). The result is a
SubtitleOutput bundling file name, content, MIME type and the generation
parameters.

RULES:
- Raises SubtitleGenerationError when there are no clips, no timestamps,
  or no cues after segmentation
- Title: explicit title > "Chapter <title> Narration Subtitle" > default
- File name: {narration_id}_subtitle.ass, media type text/x-ass
- max_length None → config.load_max_length()
- tokenizer None → jieba with config.load_jieba_dictionary()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from subtitle_engine import WordTokenizer, build_subtitles, create_tokenizer

from novel_subtitles.adapters.clip_adapter import merge_clips
from novel_subtitles.config import (
    CHAPTER_TITLE_TEMPLATE,
    DEFAULT_SUBTITLE_TITLE,
    SUBTITLE_FILE_SUFFIX,
    SUBTITLE_FORMAT,
    SUBTITLE_MEDIA_TYPE,
    load_jieba_dictionary,
    load_max_length,
)
from novel_subtitles.models import NarrationJob

logger = logging.getLogger(__name__)


class SubtitleGenerationError(ValueError):
    """The job cannot produce a subtitle file (missing audio or text)."""


@dataclass
class SubtitleOutput:
    """A generated subtitle file.

    Attributes:
        file_name: Suggested file name, e.g. ``"n1_subtitle.ass"``.
        content: ASS document text.
        media_type: MIME type of content.
        segment_count: Number of Dialogue lines.
        parameters: Human-readable generation parameters.
    """

    file_name: str
    content: str
    media_type: str
    segment_count: int
    parameters: str


def resolve_title(job: NarrationJob, title: Optional[str] = None) -> str:
    if title:
        return title
    if job.chapter_title:
        return CHAPTER_TITLE_TEMPLATE.format(job.chapter_title)
    return DEFAULT_SUBTITLE_TITLE


def generate_subtitles(
    job: NarrationJob,
    max_length: Optional[int] = None,
    title: Optional[str] = None,
    tokenizer: Optional[WordTokenizer] = None,
) -> SubtitleOutput:
    """Generate the ASS subtitle file for a narration job.

    Args:
        job: Validated narration job.
        max_length: Maximum clean characters per cue; None reads config.
        title: Explicit script title; overrides the chapter title.
        tokenizer: Optional word tokenizer for the segmenter; None uses
            jieba with the SUBTITLE_JIEBA_DICT dictionary, if configured.

    Returns:
        SubtitleOutput with the rendered file.

    Raises:
        SubtitleGenerationError: If the job has no usable clips or text.
        ValueError: If max_length or an environment override is invalid.
    """
    if max_length is None:
        max_length = load_max_length()
    if tokenizer is None:
        tokenizer = create_tokenizer(load_jieba_dictionary())

    if not job.clips:
        raise SubtitleGenerationError(
            "No audio clips found for narration {}, generate audio first".format(job.narration_id)
        )

    merged = merge_clips(job.clips)
    if not merged.timestamps:
        raise SubtitleGenerationError(
            "No character timestamps found in the audio clips of narration {}".format(job.narration_id)
        )

    document = build_subtitles(
        merged.text,
        merged.timestamps,
        title=resolve_title(job, title),
        max_length=max_length,
        tokenizer=tokenizer,
    )
    if not document.cues:
        raise SubtitleGenerationError(
            "No subtitle segments found after splitting narration {}".format(job.narration_id)
        )

    segment_count = len(document.cues)
    logger.info(
        "Generated %d subtitle cues for narration %s (%.2fs audio, %d clips skipped)",
        segment_count,
        job.narration_id,
        merged.duration,
        len(merged.skipped),
    )

    return SubtitleOutput(
        file_name="{}{}".format(job.narration_id, SUBTITLE_FILE_SUFFIX),
        content=document.content,
        media_type=SUBTITLE_MEDIA_TYPE,
        segment_count=segment_count,
        parameters="maxLength={}, format={}, segmentCount={}".format(
            max_length, SUBTITLE_FORMAT, segment_count
        ),
    )
