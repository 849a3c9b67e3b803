"""Tests for the narration subtitle pipeline and its configuration.

WHY: generate_subtitles() is what the CLI and other callers run. It owns
the failure conditions the engine leaves open (no audio, no timestamps,
nothing to show), the title rules and the output metadata.

HOW: Runs the pipeline on the sample job with the character tokenizer and
checks the SubtitleOutput fields, then each error path. Environment
overrides are set with monkeypatch.
"""

import pytest

from novel_subtitles.config import load_jieba_dictionary, load_max_length
from novel_subtitles.models import NarrationJob
from novel_subtitles.pipeline import (
    SubtitleGenerationError,
    SubtitleOutput,
    generate_subtitles,
    resolve_title,
)


@pytest.fixture
def sample_job(sample_job_dict):
    return NarrationJob.model_validate(sample_job_dict)


class TestGenerateSubtitles:
    """Successful generation."""

    def test_output_fields(self, sample_job, char_tokenizer):
        output = generate_subtitles(sample_job, max_length=12, tokenizer=char_tokenizer)
        assert isinstance(output, SubtitleOutput)
        assert output.file_name == "narration-001_subtitle.ass"
        assert output.media_type == "text/x-ass"
        assert output.segment_count == 2
        assert output.parameters == "maxLength=12, format=ass, segmentCount=2"

    def test_content(self, sample_job, char_tokenizer):
        output = generate_subtitles(sample_job, max_length=12, tokenizer=char_tokenizer)
        lines = output.content.split("\n")
        dialogues = [line for line in lines if line.startswith("Dialogue: ")]
        assert len(dialogues) == 2
        assert dialogues[0].startswith("Dialogue: 0,0:00:00.00,0:00:01.20,Default,")
        assert dialogues[1].startswith("Dialogue: 0,0:00:01.50,0:00:03.70,Default,")
        assert "Title: Chapter 第一章 Narration Subtitle\n" in output.content

    def test_max_length_from_environment(self, sample_job, char_tokenizer, monkeypatch):
        monkeypatch.setenv("SUBTITLE_MAX_LENGTH", "6")
        output = generate_subtitles(sample_job, tokenizer=char_tokenizer)
        assert output.parameters.startswith("maxLength=6,")
        assert output.segment_count == 3

    def test_explicit_max_length_wins(self, sample_job, char_tokenizer, monkeypatch):
        monkeypatch.setenv("SUBTITLE_MAX_LENGTH", "6")
        output = generate_subtitles(sample_job, max_length=12, tokenizer=char_tokenizer)
        assert output.segment_count == 2

    def test_info_log(self, sample_job, char_tokenizer, caplog):
        import logging

        with caplog.at_level(logging.INFO):
            generate_subtitles(sample_job, max_length=12, tokenizer=char_tokenizer)
        assert "Generated 2 subtitle cues for narration narration-001" in caplog.text


class TestErrors:
    """Jobs that cannot produce a subtitle file."""

    def test_no_clips(self):
        job = NarrationJob(narration_id="n1")
        with pytest.raises(SubtitleGenerationError, match="No audio clips found"):
            generate_subtitles(job, max_length=12)

    def test_no_timestamps(self):
        job = NarrationJob.model_validate({
            "narration_id": "n1",
            "clips": [{"sequence": 0, "text": "你好。", "duration": 1.0}],
        })
        with pytest.raises(SubtitleGenerationError, match="No character timestamps"):
            generate_subtitles(job, max_length=12)

    def test_no_cues(self):
        job = NarrationJob.model_validate({
            "narration_id": "n1",
            "clips": [{
                "sequence": 0,
                "text": "   ",
                "duration": 1.0,
                "timestamps": [{"character": " ", "start_time": 0.0, "end_time": 0.5}],
            }],
        })
        with pytest.raises(SubtitleGenerationError, match="No subtitle segments"):
            generate_subtitles(job, max_length=12)

    def test_generation_error_is_value_error(self):
        assert issubclass(SubtitleGenerationError, ValueError)

    @pytest.mark.parametrize("raw", ["abc", "0", "-3", "1.5"])
    def test_invalid_environment_max_length(self, raw, sample_job, monkeypatch):
        monkeypatch.setenv("SUBTITLE_MAX_LENGTH", raw)
        with pytest.raises(ValueError, match="SUBTITLE_MAX_LENGTH"):
            generate_subtitles(sample_job)


class TestTitle:
    """Explicit title > chapter title > default."""

    def test_explicit_title(self, sample_job):
        assert resolve_title(sample_job, "My Title") == "My Title"

    def test_chapter_title(self, sample_job):
        assert resolve_title(sample_job) == "Chapter 第一章 Narration Subtitle"

    def test_default_title(self):
        job = NarrationJob(narration_id="n1")
        assert resolve_title(job) == "Generated Subtitle"


class TestLoadMaxLength:
    """SUBTITLE_MAX_LENGTH parsing."""

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("SUBTITLE_MAX_LENGTH", raising=False)
        assert load_max_length() == 12

    def test_empty(self, monkeypatch):
        monkeypatch.setenv("SUBTITLE_MAX_LENGTH", "  ")
        assert load_max_length() == 12

    def test_override(self, monkeypatch):
        monkeypatch.setenv("SUBTITLE_MAX_LENGTH", " 16 ")
        assert load_max_length() == 16


class TestEngineWiring:
    """The pipeline runs the engine through build_subtitles()."""

    def test_uses_build_subtitles(self, sample_job, char_tokenizer, monkeypatch):
        import novel_subtitles.pipeline as pipeline

        calls = []
        real = pipeline.build_subtitles

        def recording(*args, **kwargs):
            document = real(*args, **kwargs)
            calls.append(document)
            return document

        monkeypatch.setattr(pipeline, "build_subtitles", recording)
        output = generate_subtitles(sample_job, max_length=12, tokenizer=char_tokenizer)
        assert len(calls) == 1
        assert output.content == calls[0].content
        assert output.segment_count == len(calls[0].cues)

    def test_custom_jieba_dictionary(self, sample_job, tmp_path, monkeypatch):
        import novel_subtitles.pipeline as pipeline

        dictionary = tmp_path / "names.txt"
        dictionary.write_text("房间 100 n\n", encoding="utf-8")
        monkeypatch.setenv("SUBTITLE_JIEBA_DICT", str(dictionary))

        requested = []
        real = pipeline.create_tokenizer

        def recording(path=None):
            requested.append(path)
            return real(path)

        monkeypatch.setattr(pipeline, "create_tokenizer", recording)
        output = generate_subtitles(sample_job, max_length=12)
        assert requested == [str(dictionary)]
        assert output.segment_count == 2

    def test_missing_jieba_dictionary(self, sample_job, tmp_path, monkeypatch):
        monkeypatch.setenv("SUBTITLE_JIEBA_DICT", str(tmp_path / "missing.txt"))
        with pytest.raises(ValueError, match="SUBTITLE_JIEBA_DICT"):
            generate_subtitles(sample_job, max_length=12)

    def test_explicit_tokenizer_skips_dictionary(self, sample_job, char_tokenizer, tmp_path, monkeypatch):
        monkeypatch.setenv("SUBTITLE_JIEBA_DICT", str(tmp_path / "missing.txt"))
        output = generate_subtitles(sample_job, max_length=12, tokenizer=char_tokenizer)
        assert output.segment_count == 2


class TestLoadJiebaDictionary:
    """SUBTITLE_JIEBA_DICT parsing."""

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("SUBTITLE_JIEBA_DICT", raising=False)
        assert load_jieba_dictionary() is None

    def test_existing_file(self, tmp_path, monkeypatch):
        dictionary = tmp_path / "dict.txt"
        dictionary.write_text("房间 100 n\n", encoding="utf-8")
        monkeypatch.setenv("SUBTITLE_JIEBA_DICT", str(dictionary))
        assert load_jieba_dictionary() == str(dictionary)
