import pytest

SAMPLE_SRT = (
    "1\n00:00:01,000 --> 00:00:02,000\nHello there.\n\n"
    "2\n00:00:03,000 --> 00:00:04,000\n[music playing]\n\n"
    "3\n00:00:05,000 --> 00:00:07,500\nHow are you?\nFine, thanks.\n"
)


@pytest.fixture
def sample_srt() -> str:
    return SAMPLE_SRT


@pytest.fixture
def srt_file(tmp_path, sample_srt):
    path = tmp_path / "movie.srt"
    path.write_text(sample_srt, encoding="utf-8")
    return path
