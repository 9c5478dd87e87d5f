"""Tests for timed-text rendering, parsing and live caption export."""

from __future__ import annotations

import dataclasses

import pytest

from accessible_learning.captions import (
    FIXED_CHUNKS,
    SRT,
    WEBVTT,
    CaptionHistory,
    Cue,
    CueFormat,
    InvalidInputError,
    format_timestamp,
    parse,
    parse_timestamp,
    render,
    synthesize,
    words_to_captions,
)


class TestTimestamps:

    @pytest.mark.parametrize(
        "ms, expected",
        [
            (0, "00:00:00.000"),
            (999, "00:00:00.999"),
            (1000, "00:00:01.000"),
            (61_001, "00:01:01.001"),
            (3_600_000, "01:00:00.000"),
            (3_723_456, "01:02:03.456"),
            (360_000_000, "100:00:00.000"),
        ],
    )
    def test_format(self, ms, expected):
        assert format_timestamp(ms) == expected

    def test_srt_separator(self):
        assert format_timestamp(3_723_456, ",") == "01:02:03,456"

    def test_negative_clamped_to_zero(self):
        assert format_timestamp(-500) == "00:00:00.000"
        assert format_timestamp(-1, ",") == "00:00:00,000"

    @pytest.mark.parametrize("value", ["01:02:03.456", "01:02:03,456", " 01:02:03.456 "])
    def test_parse_either_separator(self, value):
        assert parse_timestamp(value) == 3_723_456

    @pytest.mark.parametrize("value", ["1:02:03.456", "01:02:03", "01:02:03.45", "abc"])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(InvalidInputError):
            parse_timestamp(value)


class TestRender:

    def test_empty_webvtt_is_header_only(self):
        assert render([]) == "WEBVTT\n\n"

    def test_empty_srt_is_empty(self):
        assert render([], SRT) == ""

    def test_hello_world(self):
        cues = [Cue(index=1, start_ms=0, end_ms=1000, text="hello world")]
        assert render(cues) == "WEBVTT\n\n1\n00:00:00.000 --> 00:00:01.000\nhello world\n\n"

    def test_srt_block(self):
        cues = [Cue(index=1, start_ms=0, end_ms=1000, text="hello world")]
        assert render(cues, SRT) == "1\n00:00:00,000 --> 00:00:01,000\nhello world\n\n"

    def test_cue_text_is_written_verbatim(self):
        cues = [Cue(index=1, start_ms=0, end_ms=10, text="<b>bold</b> & more")]
        assert "\n<b>bold</b> & more\n" in render(cues)

    def test_block_count_matches_cues(self, word_factory):
        cues = synthesize(word_factory(40, span_ms=200))
        body = render(cues)[len("WEBVTT\n\n"):]
        blocks = [b for b in body.split("\n\n") if b]
        assert len(blocks) == len(cues)

    def test_words_to_captions_uses_format_bounds(self, word_factory):
        words = word_factory(25, span_ms=1000)
        document = words_to_captions(words, FIXED_CHUNKS)
        cues = parse(document)
        assert [len(c.text.split(" ")) for c in cues] == [10, 10, 5]

    def test_words_to_captions_defaults_to_webvtt(self, sample_words):
        document = words_to_captions(sample_words)
        assert document.startswith("WEBVTT\n\n1\n00:00:00.240 --> 00:00:02.600\n")


class TestCueFormat:

    def test_presets(self):
        assert (WEBVTT.max_words_per_cue, WEBVTT.max_cue_duration_ms) == (15, 5000)
        assert WEBVTT.header == "WEBVTT"
        assert SRT.header is None
        assert SRT.decimal_separator == ","
        assert (FIXED_CHUNKS.max_words_per_cue, FIXED_CHUNKS.max_cue_duration_ms) == (10, None)

    def test_rejects_zero_words(self):
        with pytest.raises(ValueError):
            CueFormat(max_words_per_cue=0)

    def test_rejects_unknown_separator(self):
        with pytest.raises(ValueError):
            CueFormat(decimal_separator=":")

    def test_replace_keeps_other_fields(self):
        fmt = dataclasses.replace(SRT, max_words_per_cue=5)
        assert fmt.decimal_separator == ","
        assert fmt.max_words_per_cue == 5


class TestParse:

    def test_round_trip_webvtt(self, word_factory):
        cues = synthesize(word_factory(33, span_ms=450, gap_ms=15))
        assert parse(render(cues)) == cues

    def test_round_trip_srt(self, word_factory):
        cues = synthesize(word_factory(33, span_ms=450, gap_ms=15))
        assert parse(render(cues, SRT), header=None) == cues

    def test_negative_times_parse_back_as_zero(self):
        cues = synthesize([{"text": "early", "start": -500, "end": 400}])
        assert cues[0].start_ms == -500
        assert parse(render(cues)) == [Cue(index=1, start_ms=0, end_ms=400, text="early")]

    def test_empty_document(self):
        assert parse("") == []
        assert parse("WEBVTT\n\n") == []

    def test_crlf_line_endings(self):
        content = "WEBVTT\r\n\r\n1\r\n00:00:01.000 --> 00:00:02.000\r\nhi\r\n\r\n"
        assert parse(content) == [Cue(index=1, start_ms=1000, end_ms=2000, text="hi")]

    def test_multiline_cue_text(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nline one\nline two\n"
        assert parse(content, header=None)[0].text == "line one\nline two"

    @pytest.mark.parametrize(
        "content",
        [
            "WEBVTT\n\nx\n00:00:01.000 --> 00:00:02.000\nhi\n",
            "WEBVTT\n\n1\nnot a time range\nhi\n",
            "WEBVTT\n\n1\n",
        ],
    )
    def test_malformed_block(self, content):
        with pytest.raises(InvalidInputError):
            parse(content)


class TestCaptionHistory:

    def test_cue_ends_at_next_phrase(self):
        history = CaptionHistory()
        history.add("first", 1.0)
        history.add("second", 2.5)
        cues = history.to_cues()
        assert [(c.start_ms, c.end_ms) for c in cues] == [(1000, 2500), (2500, 5500)]

    def test_last_phrase_gets_tail(self):
        history = CaptionHistory(tail_seconds=1.5)
        history.add("only", 10.0)
        assert history.to_cues()[0].end_ms == 11_500

    def test_offsets_are_rounded(self):
        history = CaptionHistory()
        history.add("a", 0.0006)
        history.add("b", 1.2346)
        cues = history.to_cues()
        assert cues[0].start_ms == 1
        assert cues[1].start_ms == 1235

    def test_export_defaults_to_srt(self):
        history = CaptionHistory()
        history.add("hello class", 0.0)
        assert history.export() == "1\n00:00:00,000 --> 00:00:03,000\nhello class\n\n"

    def test_export_webvtt(self):
        history = CaptionHistory()
        history.add("hello class", 0.0)
        assert history.export(WEBVTT).startswith("WEBVTT\n\n1\n00:00:00.000 --> 00:00:03.000\n")

    def test_empty_history(self):
        history = CaptionHistory()
        assert len(history) == 0
        assert history.to_cues() == []
        assert history.export() == ""

    def test_insertion_order_kept(self):
        history = CaptionHistory()
        history.add("later", 5.0)
        history.add("earlier", 1.0)
        assert [c.text for c in history.to_cues()] == ["later", "earlier"]

    def test_clear(self):
        history = CaptionHistory()
        history.add("a", 0.0)
        history.clear()
        assert len(history) == 0
        assert history.entries == []

    def test_from_dicts(self):
        history = CaptionHistory.from_dicts([
            {"text": "one", "timestamp": 0},
            {"text": "two", "timestamp": 2.25},
        ])
        assert [e.text for e in history.entries] == ["one", "two"]
        dumped = history.to_dicts()
        assert dumped[1]["timestamp"] == 2.25
        assert "time" in dumped[1]

    @pytest.mark.parametrize(
        "entry",
        [{"timestamp": 1.0}, {"text": "x"}, {"text": "x", "timestamp": "1"}, {"text": "x", "timestamp": False}],
    )
    def test_from_dicts_rejects_malformed(self, entry):
        with pytest.raises(InvalidInputError):
            CaptionHistory.from_dicts([entry])

    @pytest.mark.parametrize("offset", [1e308, float("nan"), float("inf"), -float("inf"), 10 ** 400])
    def test_from_dicts_rejects_non_finite_offsets(self, offset):
        with pytest.raises(InvalidInputError, match="finite"):
            CaptionHistory.from_dicts([{"text": "a", "timestamp": offset}])

    def test_large_finite_offset_still_exports(self):
        history = CaptionHistory.from_dicts([{"text": "late", "timestamp": 360000}])
        assert history.export().startswith("1\n100:00:00,000 --> 100:00:03,000\n")
