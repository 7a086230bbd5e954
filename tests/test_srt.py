import logging

import pytest

from subbridge import srt
from subbridge.srt import count_subtitles, fallback_count, is_annotation, split_blocks


def test_counts_cues_and_skips_annotations():
    content = (
        "1\n00:00:01,000 --> 00:00:02,000\nHello\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\n[music]\n"
    )
    assert count_subtitles(content) == 1


def test_sample_file(sample_srt):
    assert count_subtitles(sample_srt) == 2


def test_line_endings_and_bom_do_not_change_count(sample_srt):
    crlf = sample_srt.replace("\n", "\r\n")
    cr = sample_srt.replace("\n", "\r")
    assert count_subtitles(crlf) == 2
    assert count_subtitles(cr) == 2
    assert count_subtitles("\ufeff" + sample_srt) == 2
    assert count_subtitles("\ufeff" + crlf) == 2


def test_blocks_without_timing_line_are_ignored():
    content = (
        "1\nnot a timestamp\nHello\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\n\n"
        "3\n00:00:05,000 --> 00:00:06,000\nReal line\n"
    )
    assert count_subtitles(content) == 1


def test_extra_blank_lines_between_blocks():
    content = (
        "1\n00:00:01,000 --> 00:00:02,000\nOne\n\n\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\nTwo\n  \n"
        "3\n00:00:05,000 --> 00:00:06,000\nThree\n"
    )
    assert count_subtitles(content) == 3


def test_empty_content():
    assert count_subtitles("") == 0
    assert count_subtitles("\n\n\n") == 0


def test_split_blocks_keeps_text_lines(sample_srt):
    blocks = split_blocks(sample_srt)
    assert [b.index for b in blocks] == ["1", "2", "3"]
    assert blocks[2].text == "How are you?\nFine, thanks."


@pytest.mark.parametrize(
    "text, expected",
    [
        ("[music playing]", True),
        ("  [door slams]  ", True),
        ("[SIGHS\nLOUDLY]", True),
        ("[laughs] That's funny", False),
        ("[one] [two]", False),
        ("Hello", False),
        ("(whispering)", False),
    ],
)
def test_is_annotation(text, expected):
    assert is_annotation(text) is expected


def test_unparseable_content_falls_back_to_size():
    # bytes cannot be parsed as text
    assert count_subtitles(b"x" * 2048) == 28


def test_fallback_is_logged(monkeypatch, caplog):
    def broken(content):
        raise ValueError("bad block")

    monkeypatch.setattr(srt, "split_blocks", broken)
    content = "a" * 1024
    with caplog.at_level(logging.WARNING, logger="subbridge.srt"):
        assert count_subtitles(content) == 14
    assert "estimating 14" in caplog.text


def test_fallback_count_never_raises():
    assert fallback_count(None) == 1
    assert fallback_count(b"") == 0
    assert fallback_count("é" * 512) == 14


def test_read_srt_text(srt_file, sample_srt):
    assert srt.read_srt_text(srt_file) == sample_srt
