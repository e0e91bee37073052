"""Line normalization, section extraction and quote-aware tokenization.

Example:
    >>> lines = normalize("[PreSeq]\\n  x \\n[EndPreSeq]")
    >>> extract_section("PreSeq", lines)
    ['x']
    >>> split_escaped('text T1 "hello world" n n', " ", '"')
    ['text', 'T1', 'hello world', 'n', 'n']
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from .errors import SectionNotFoundError

logger = logging.getLogger(__name__)


def normalize(text: str) -> list[str]:
    """Split raw script text into whitespace-trimmed lines; empty lines are kept."""
    return [line.strip() for line in text.split("\n")]


def locate_section(keyword: str, instructions: Sequence[str]) -> Tuple[int, int]:
    """Return the indices of the ``[keyword]`` and ``[End<keyword>]`` marker lines.

    The first start marker wins, and the first end marker after it closes the
    section; later markers are ignored. An end marker seen before the first
    start marker makes the section misordered.

    Raises:
        SectionNotFoundError: If a marker is missing, or an end marker precedes
            the first start marker.
    """
    start_marker = f"[{keyword}]"
    end_marker = f"[End{keyword}]"
    start: Optional[int] = None
    stray_end: Optional[int] = None

    for index, instruction in enumerate(instructions):
        if instruction == start_marker:
            if start is None:
                start = index
        elif instruction == end_marker:
            if start is not None:
                if stray_end is not None:
                    raise SectionNotFoundError(keyword, missing=end_marker, misordered=True)
                logger.debug("section %s spans lines %d-%d", keyword, start + 1, index + 1)
                return start, index
            if stray_end is None:
                stray_end = index

    if start is not None and stray_end is not None:
        raise SectionNotFoundError(keyword, missing=end_marker, misordered=True)
    raise SectionNotFoundError(keyword, missing=start_marker if start is None else end_marker)


def extract_section(keyword: str, instructions: Sequence[str]) -> list[str]:
    """Return the lines strictly between the markers of section ``keyword``."""
    start, end = locate_section(keyword, instructions)
    return list(instructions[start + 1 : end])


def split_escaped(text: str, delimiter: str, quote_char: str) -> list[str]:
    """Split ``text`` on ``delimiter``, except inside ``quote_char`` spans.

    Quote characters toggle the quoted state and are dropped from the output.
    An unbalanced quote leaves the rest of the line quoted, and that unfinished
    token is never emitted.

    Example:
        >>> split_escaped("x", " ", '"')
        ['x']
    """
    tokens: list[str] = []
    buffer: list[str] = []
    quoted = False

    for char in text + delimiter:
        if char == quote_char:
            quoted = not quoted
        elif char == delimiter and not quoted:
            tokens.append("".join(buffer))
            buffer = []
        else:
            buffer.append(char)

    return tokens
