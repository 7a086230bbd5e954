"""SRT subtitle reading and cue counting."""

import logging
import math
import re
from pathlib import Path

from .models import CueBlock

logger = logging.getLogger(__name__)

BOM = "\ufeff"
TIMING_MARKER = "-->"

# Empirical average of subtitles per kilobyte of SRT text
CUES_PER_KB = 13.6

# A cue whose whole text is one bracketed span, e.g. "[music playing]"
ANNOTATION_RE = re.compile(r"^\[[^\[\]]*\]$")
BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


def normalize_text(content: str) -> str:
    """Strip a leading BOM and convert CRLF/CR line endings to LF."""
    if content.startswith(BOM):
        content = content[1:]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def split_blocks(content: str) -> list[CueBlock]:
    """Split SRT content into cue blocks with a valid timing line.

    Args:
        content: Raw SRT file content

    Returns:
        List of CueBlock objects, in file order
    """
    blocks = []
    for raw_block in BLANK_LINE_RE.split(normalize_text(content)):
        lines = raw_block.strip().split("\n")
        if len(lines) < 3 or TIMING_MARKER not in lines[1]:
            continue
        blocks.append(CueBlock(index=lines[0], timing=lines[1], lines=lines[2:]))
    return blocks


def is_annotation(text: str) -> bool:
    """Check if cue text is only a bracketed sound or speaker annotation."""
    return bool(ANNOTATION_RE.match(text.strip()))


def fallback_count(content) -> int:
    """Estimate the number of subtitles from the size of the content."""
    try:
        if isinstance(content, (bytes, bytearray)):
            size = len(content)
        else:
            size = len(str(content).encode("utf-8", errors="replace"))
    except Exception:
        size = 0
    return math.ceil(size / 1024 * CUES_PER_KB)


def count_subtitles(content: str) -> int:
    """Count the subtitles in SRT content that need translating.

    Blocks whose text is a lone bracketed annotation are skipped, since the
    backend leaves them untouched. If the content cannot be parsed the count
    is estimated from its size instead.

    Args:
        content: Raw SRT file content

    Returns:
        Number of translatable subtitles
    """
    try:
        return sum(1 for block in split_blocks(content) if not is_annotation(block.text))
    except Exception as e:
        count = fallback_count(content)
        logger.warning("Could not parse subtitles (%s), estimating %d from size", e, count)
        return count


def read_srt_text(path: str | Path) -> str:
    """Read an SRT file as text.

    Args:
        path: Path to the SRT file

    Returns:
        File content, undecodable bytes replaced
    """
    path = Path(path)
    return path.read_text(encoding="utf-8", errors="replace")
