"""Shared test fixtures for the subtitle test suite.

WHY: Segmenter, aligner, pipeline and CLI tests all need the same kind of
input: narration text with one TTS timestamp per character. Building it
in one place keeps expected times easy to compute by hand.

HOW: make_timestamps() gives character i the interval
[start + i*step, start + (i+1)*step]. Fixtures expose it as a factory,
plus a deterministic character tokenizer and a sample narration job.

RULES:
- Punctuation characters get timestamps too, like real TTS output.
- Sample data uses the narration from the reference scenario:
  "他走进了房间。他看了看四周，然后坐下。"
- Tests that assert exact cue boundaries use the character tokenizer so
  results do not depend on jieba's dictionary.
"""

from typing import Any, Dict, List

import pytest

from subtitle_engine import CharacterTimestamp, CharacterTokenizer

SAMPLE_TEXT = "他走进了房间。他看了看四周，然后坐下。"


def make_timestamps(text, start=0.0, step=0.2):
    """One timestamp per character of text, step seconds each."""
    timestamps = []  # type: List[CharacterTimestamp]
    for i, char in enumerate(text):
        timestamps.append(CharacterTimestamp(
            character=char,
            start_time=start + i * step,
            end_time=start + (i + 1) * step,
        ))
    return timestamps


def assert_monotonic(cues):
    """Every cue has positive duration and ends before the next starts."""
    for cue in cues:
        assert cue.start_time < cue.end_time, cue
    for prev, cur in zip(cues, cues[1:]):
        assert prev.end_time <= cur.start_time, (prev, cur)


def _clip_dict(text, duration, sequence, step=0.2):
    return {
        "sequence": sequence,
        "text": text,
        "duration": duration,
        "timestamps": [
            {"character": ts.character, "start_time": ts.start_time, "end_time": ts.end_time}
            for ts in make_timestamps(text, step=step)
        ],
    }


@pytest.fixture
def timestamps_for():
    """Factory: text -> per-character timestamps."""
    return make_timestamps


@pytest.fixture
def check_monotonic():
    return assert_monotonic


@pytest.fixture
def char_tokenizer():
    return CharacterTokenizer()


@pytest.fixture
def sample_job_dict():
    """Narration job with two clips voicing the two sample sentences.

    Clip 0: "他走进了房间。" (7 chars, 1.4s of timestamps, 1.5s of audio)
    Clip 1: "他看了看四周，然后坐下。" (12 chars, offset by 1.5s)
    """
    data = {
        "narration_id": "narration-001",
        "chapter_title": "第一章",
        "clips": [
            _clip_dict("他走进了房间。", 1.5, 0),
            _clip_dict("他看了看四周，然后坐下。", 2.5, 1),
        ],
    }  # type: Dict[str, Any]
    return data
