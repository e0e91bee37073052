"""Decoding of ``[Descriptions]`` lines into the stimulus catalog.

Stimulus grammar::

    <type> <identifier> <fields...>
    image     <identifier> <file_path> [<button>]
    text      <identifier> "<content>" <font_size> <font_color>
    text_file <identifier> <file_path> <font_size> <font_color>
    audio     <identifier> <file_path>
    video     <identifier> <file_path>

``n`` in a font position selects the runtime default. Any token in the image
button position enables the button, whatever its value.

Example:
    >>> catalog = decode_stimuli(['text T1 "hello world" n n'])
    >>> catalog["T1"].content
    'hello world'
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from .core import (
    STIMULUS_MODELS,
    AudioStimulus,
    ImageStimulus,
    Stimulus,
    StimulusType,
    TextFileStimulus,
    TextStimulus,
    VideoStimulus,
)
from .errors import (
    DuplicateStimulusIdentifierError,
    InvalidStimulusTypeError,
    MalformedInstructionError,
)
from .lexer import split_escaped
from .timing import NONE_TOKEN, parse_number

logger = logging.getLogger(__name__)

DELIMITER = " "
QUOTE_CHAR = '"'


def _optional_field(fields: Sequence[str], index: int) -> Optional[str]:
    if index >= len(fields) or fields[index] == NONE_TOKEN:
        return None
    return fields[index]


def _font_size(fields: Sequence[str], index: int, instruction: str, line_number: Optional[int]) -> Optional[int]:
    token = _optional_field(fields, index)
    if token is None:
        return None
    try:
        size = parse_number(token)
    except ValueError:
        size = None
    if not isinstance(size, int):
        raise MalformedInstructionError(
            f"Font size '{token}' is not an integer.",
            instruction=instruction,
            line_number=line_number,
            remediation_hint="Give the font size in whole pixels, or n for the default.",
        )
    return size


def decode_stimulus(instruction: str, *, line_number: Optional[int] = None) -> Stimulus:
    """Decode one stimulus description line.

    Raises:
        InvalidStimulusTypeError: If the type tag has no field layout.
        MalformedInstructionError: If required tokens are missing or a font
            size is not an integer.
    """
    tokens = split_escaped(instruction, DELIMITER, QUOTE_CHAR)
    if not tokens:
        raise MalformedInstructionError(
            "The description has an unclosed quote before its first field.",
            instruction=instruction,
            line_number=line_number,
            remediation_hint="Close every \" opened in the line.",
        )
    type_token = tokens[0]
    try:
        stimulus_type: Optional[StimulusType] = StimulusType(type_token)
    except ValueError:
        stimulus_type = None
    if stimulus_type not in STIMULUS_MODELS:
        raise InvalidStimulusTypeError(type_token, instruction=instruction, line_number=line_number)

    if len(tokens) < 3 or not tokens[1]:
        raise MalformedInstructionError(
            f"A {stimulus_type.value} description needs an identifier and a "
            f"{'content' if stimulus_type is StimulusType.TEXT else 'file path'}.",
            instruction=instruction,
            line_number=line_number,
        )
    identifier, fields = tokens[1], tokens[2:]

    if stimulus_type is StimulusType.IMAGE:
        return ImageStimulus(
            identifier=identifier,
            file_path=fields[0],
            button=len(fields) > 1 and bool(fields[1]),
        )
    if stimulus_type is StimulusType.TEXT:
        return TextStimulus(
            identifier=identifier,
            content=fields[0],
            font_size=_font_size(fields, 1, instruction, line_number),
            font_color=_optional_field(fields, 2),
        )
    if stimulus_type is StimulusType.TEXT_FILE:
        return TextFileStimulus(
            identifier=identifier,
            file_path=fields[0],
            font_size=_font_size(fields, 1, instruction, line_number),
            font_color=_optional_field(fields, 2),
        )
    if stimulus_type is StimulusType.AUDIO:
        return AudioStimulus(identifier=identifier, file_path=fields[0])
    return VideoStimulus(identifier=identifier, file_path=fields[0])


def decode_stimuli(
    instructions: Sequence[str],
    *,
    strict_identifiers: bool = False,
    first_line: Optional[int] = None,
) -> Mapping[str, Stimulus]:
    """Build the read-only stimulus catalog from ``[Descriptions]`` lines.

    Parameters:
        instructions: Lines between the section markers; empty lines are skipped.
        strict_identifiers: Reject repeated identifiers instead of letting the
            later description replace the earlier one.
        first_line: 1-based source line of ``instructions[0]``, for error reports.

    Raises:
        DuplicateStimulusIdentifierError: On a repeated identifier in strict mode.
    """
    catalog: dict[str, Stimulus] = {}
    for offset, instruction in enumerate(instructions):
        if not instruction:
            continue
        line_number = None if first_line is None else first_line + offset
        stimulus = decode_stimulus(instruction, line_number=line_number)
        if stimulus.identifier in catalog:
            if strict_identifiers:
                raise DuplicateStimulusIdentifierError(
                    stimulus.identifier, instruction=instruction, line_number=line_number
                )
            logger.warning(
                "stimulus %s redeclared; the later description replaces the earlier one",
                stimulus.identifier,
            )
        catalog[stimulus.identifier] = stimulus

    logger.debug("decoded %d stimuli", len(catalog))
    return MappingProxyType(catalog)
