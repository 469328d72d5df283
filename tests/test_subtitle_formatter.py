"""Tests for timestamp formatting and SRT writing."""

import logging

import pytest

from vosksrt.exceptions import FileSystemError, FormattingError
from vosksrt.models import Cue, WordEntry
from vosksrt.segmenter import segment_words
from vosksrt.subtitle_formatter import SRTFormatter
from vosksrt.utils import ensure_dir_exists, format_time_srt

from conftest import SCENARIO_WORDS


class TestFormatTimeSrt:

    def test_zero(self):
        assert format_time_srt(0.0) == "00:00:00,000"

    def test_round_half_up_at_millisecond(self):
        assert format_time_srt(3661.4995) == "01:01:01,500"

    def test_rounds_down_below_half(self):
        assert format_time_srt(1.2344) == "00:00:01,234"

    def test_negative_clamps_to_zero(self):
        assert format_time_srt(-5.0) == "00:00:00,000"

    def test_rounding_carries_into_seconds(self):
        assert format_time_srt(59.9996) == "00:01:00,000"

    def test_hours_past_a_day(self):
        assert format_time_srt(90061.25) == "25:01:01,250"

    def test_common_values(self):
        assert format_time_srt(2.4) == "00:00:02,400"
        assert format_time_srt(2.8) == "00:00:02,800"
        assert format_time_srt(0.1) == "00:00:00,100"


class TestEnsureDirExists:

    def test_creates_nested(self, tmp_path):
        target = tmp_path / "a" / "b"
        ensure_dir_exists(str(target))
        assert target.is_dir()

    def test_rejects_file(self, tmp_path):
        existing = tmp_path / "file.txt"
        existing.write_text("x")
        with pytest.raises(FileSystemError):
            ensure_dir_exists(str(existing))

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            ensure_dir_exists("")


class TestSRTFormatter:

    def test_scenario_file(self, tmp_path):
        cues = segment_words([WordEntry(*w) for w in SCENARIO_WORDS])
        out = tmp_path / "out.srt"
        assert SRTFormatter().write_cues(cues, str(out)) is True
        assert out.read_text(encoding="utf-8") == (
            "1\n"
            "00:00:00,000 --> 00:00:02,400\n"
            "hello world foo bar baz qux\n\n"
            "2\n"
            "00:00:02,500 --> 00:00:02,800\n"
            "extra\n\n"
        )

    def test_empty_cues_write_empty_file(self, tmp_path):
        out = tmp_path / "empty.srt"
        SRTFormatter().write_cues([], str(out))
        assert out.exists()
        assert out.read_text(encoding="utf-8") == ""

    def test_creates_parent_directory(self, tmp_path):
        out = tmp_path / "nested" / "dir" / "out.srt"
        SRTFormatter().write_cues([Cue(1, 0.0, 1.0, "hi")], str(out))
        assert out.read_text(encoding="utf-8").startswith("1\n00:00:00,000 --> 00:00:01,000\nhi\n")

    def test_unicode_text(self, tmp_path):
        out = tmp_path / "uni.srt"
        SRTFormatter().write_cues([Cue(1, 0.0, 1.0, "привет мир")], str(out))
        assert "привет мир" in out.read_text(encoding="utf-8")

    def test_write_failure_raises_by_default(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(FileSystemError):
            SRTFormatter().write_cues([Cue(1, 0.0, 1.0, "hi")], str(blocker / "out.srt"))

    def test_output_path_is_directory(self, tmp_path):
        with pytest.raises(FileSystemError):
            SRTFormatter().write_cues([], str(tmp_path))

    def test_write_failure_ignored_when_configured(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        written = SRTFormatter(on_write_error="ignore").write_cues([Cue(1, 0.0, 1.0, "hi")], str(blocker / "out.srt"))
        assert written is False
        assert "Output dropped" in caplog.text

    def test_unknown_policy(self):
        with pytest.raises(FormattingError):
            SRTFormatter(on_write_error="maybe")
