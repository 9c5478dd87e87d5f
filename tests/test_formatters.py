"""Unit tests for the formatter registry and each caption formatter.

WHY: The API and CLI pick formatters by key. A wrong suffix or MIME type
breaks the course player's ``<track>`` element even when the cue timing
is correct.

HOW: Every registered formatter is run over the shared sample words; the
output is parsed back where the format allows it.

RULES:
- All tests use the sample_words / word_factory fixtures from conftest.py
"""

import pytest

from accessible_learning.captions import InvalidInputError, parse
from accessible_learning.formatters import DEFAULT_FORMAT, FORMATTERS
from accessible_learning.formatters.base import BaseFormatter, FormatterOutput
from accessible_learning.formatters.plain_text import PlainTextFormatter
from accessible_learning.formatters.srt import SRTFormatter
from accessible_learning.formatters.webvtt import FixedChunkFormatter, WebVTTFormatter


class TestRegistry:

    def test_default_is_registered(self):
        assert DEFAULT_FORMAT in FORMATTERS

    def test_keys(self):
        assert set(FORMATTERS) == {"webvtt", "srt", "fixed_chunks", "plain_text"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_every_formatter_returns_one_output(self, key, sample_words):
        formatter = FORMATTERS[key]()
        assert isinstance(formatter, BaseFormatter)
        assert formatter.name
        outputs = formatter.format(sample_words)
        assert len(outputs) == 1
        assert isinstance(outputs[0], FormatterOutput)

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_class_attributes_match_output(self, key, sample_words):
        formatter = FORMATTERS[key]()
        output = formatter.format(sample_words)[0]
        assert (output.suffix, output.media_type) == (formatter.suffix, formatter.media_type)

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_every_formatter_rejects_malformed_words(self, key):
        with pytest.raises(InvalidInputError):
            FORMATTERS[key]().format([{"text": "x", "start": 0}])


class TestWebVTTFormatter:

    def test_output(self, sample_words):
        output = WebVTTFormatter().format(sample_words)[0]
        assert output.suffix == ".vtt"
        assert output.media_type == "text/vtt"
        assert output.content == (
            "WEBVTT\n\n"
            "1\n00:00:00.240 --> 00:00:02.600\n"
            "Welcome to today's lesson on machine learning.\n\n"
        )

    def test_empty_words(self):
        assert WebVTTFormatter().format([])[0].content == "WEBVTT\n\n"

    def test_splits_on_word_count(self, word_factory):
        content = WebVTTFormatter().format(word_factory(31))[0].content
        assert [c.index for c in parse(content)] == [1, 2, 3]


class TestFixedChunkFormatter:

    def test_ten_words_per_cue_regardless_of_duration(self, word_factory):
        output = FixedChunkFormatter().format(word_factory(21, span_ms=2000))[0]
        cues = parse(output.content)
        assert [len(c.text.split(" ")) for c in cues] == [10, 10, 1]
        assert cues[0].duration_ms == 20_000
        assert output.suffix == "-chunks.vtt"


class TestSRTFormatter:

    def test_output(self, sample_words):
        output = SRTFormatter().format(sample_words)[0]
        assert output.suffix == ".srt"
        assert output.media_type == "application/x-subrip"
        assert output.content.startswith("1\n00:00:00,240 --> 00:00:02,600\n")
        assert "WEBVTT" not in output.content

    def test_same_segmentation_as_webvtt(self, word_factory):
        words = word_factory(50, span_ms=300)
        vtt = parse(WebVTTFormatter().format(words)[0].content)
        srt = parse(SRTFormatter().format(words)[0].content, header=None)
        assert vtt == srt


class TestPlainTextFormatter:

    def test_one_line_per_cue(self, word_factory):
        output = PlainTextFormatter().format(word_factory(16))[0]
        lines = output.content.split("\n")
        assert lines[0] == " ".join("w{}".format(i) for i in range(1, 16))
        assert lines[1] == "w16"
        assert output.content.endswith("\n")
        assert output.suffix == ".txt"
        assert output.media_type == "text/plain"

    def test_empty_words(self):
        assert PlainTextFormatter().format([])[0].content == ""
