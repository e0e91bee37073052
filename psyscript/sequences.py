"""Decoding of ``[PreSeq]``, ``[MainSeq]`` and ``[PostSeq]`` lines.

Sequence grammar, 13 space-separated fields::

    <onSetTime> <identifier> <stimDur> <choices> <choiceDur> <answer>
    <choiceOnsetRelativeToSim> <reactionTime> <feedbackType> <feedbackDur>
    <feedback1> <feedback2> <test>

    <stimDur>, <choiceDur>, <choiceOnsetRelativeToSim>,
    <reactionTime>, <feedbackDur> := n | inf | <number>
    <choices>      := n | <identifier>,<identifier>,...
    <feedbackType> := n | tf | a | c
    <test>         := y | n
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Tuple

from .core import FEEDBACK_FIELDS, SEQUENCE_NAMES, FeedbackType, SequenceStep, Stimulus
from .errors import (
    InvalidFeedbackTypeError,
    MalformedInstructionError,
    UnknownStimulusIdentifierError,
)
from .timing import NONE_TOKEN, Timing, parse_number

logger = logging.getLogger(__name__)

FIELD_NAMES: Tuple[str, ...] = (
    "on_set_time",
    "identifier",
    "stimulus_duration",
    "choices",
    "choice_duration",
    "answer",
    "choice_onset_relative_to_sim",
    "reaction_time",
    "feedback_type",
    "feedback_duration",
    "feedback1",
    "feedback2",
    "test",
)

TIMING_FIELDS: Tuple[str, ...] = (
    "stimulus_duration",
    "choice_duration",
    "choice_onset_relative_to_sim",
    "reaction_time",
    "feedback_duration",
)


def _timing(name: str, token: str, instruction: str, line_number: Optional[int]) -> Timing:
    try:
        return Timing.parse(token)
    except ValueError:
        raise MalformedInstructionError(
            f"Field {name} must be n, inf or a number, got '{token}'.",
            instruction=instruction,
            line_number=line_number,
        ) from None


def resolve_choices(
    token: str,
    catalog: Mapping[str, Stimulus],
    *,
    instruction: str = "",
    line_number: Optional[int] = None,
) -> Optional[Tuple[Stimulus, ...]]:
    """Resolve a comma-separated identifier list; ``n`` resolves to ``None``.

    Raises:
        UnknownStimulusIdentifierError: If any identifier is not in ``catalog``.
    """
    if token == NONE_TOKEN:
        return None
    resolved = []
    for identifier in token.split(","):
        if identifier not in catalog:
            raise UnknownStimulusIdentifierError(
                identifier, instruction=instruction, line_number=line_number
            )
        resolved.append(catalog[identifier])
    return tuple(resolved)


def decode_step(
    instruction: str,
    catalog: Mapping[str, Stimulus],
    *,
    line_number: Optional[int] = None,
) -> SequenceStep:
    """Decode one 13-field sequence line against a stimulus catalog."""
    tokens = instruction.split(" ")
    if len(tokens) != len(FIELD_NAMES):
        raise MalformedInstructionError(
            f"A sequence step needs {len(FIELD_NAMES)} space-separated fields, got {len(tokens)}.",
            instruction=instruction,
            line_number=line_number,
            remediation_hint="Separate fields with single spaces and write n for unused fields.",
        )
    raw = dict(zip(FIELD_NAMES, tokens))

    try:
        on_set_time = parse_number(raw["on_set_time"])
    except ValueError:
        raise MalformedInstructionError(
            f"Field on_set_time must be a number, got '{raw['on_set_time']}'.",
            instruction=instruction,
            line_number=line_number,
        ) from None
    fields = {name: _timing(name, raw[name], instruction, line_number) for name in TIMING_FIELDS}
    choices = resolve_choices(
        raw["choices"], catalog, instruction=instruction, line_number=line_number
    )

    try:
        feedback_type = FeedbackType(raw["feedback_type"])
    except ValueError:
        raise InvalidFeedbackTypeError(
            raw["feedback_type"], instruction=instruction, line_number=line_number
        ) from None

    attached = FEEDBACK_FIELDS[feedback_type]
    return SequenceStep(
        on_set_time=on_set_time,
        identifier=raw["identifier"],
        choices=choices,
        answer=raw["answer"],
        feedback_type=feedback_type,
        feedback1=raw["feedback1"] if "feedback1" in attached else None,
        feedback2=raw["feedback2"] if "feedback2" in attached else None,
        test=raw["test"],
        **fields,
    )


def decode_sequence(
    instructions: Sequence[str],
    catalog: Mapping[str, Stimulus],
    *,
    first_line: Optional[int] = None,
) -> Tuple[SequenceStep, ...]:
    """Decode one sequence section in source order; empty lines are skipped."""
    steps = []
    for offset, instruction in enumerate(instructions):
        if not instruction:
            continue
        line_number = None if first_line is None else first_line + offset
        steps.append(decode_step(instruction, catalog, line_number=line_number))
    return tuple(steps)


def decode_sequences(
    sections: Mapping[str, Sequence[str]],
    catalog: Mapping[str, Stimulus],
    *,
    first_lines: Optional[Mapping[str, int]] = None,
) -> dict[str, Tuple[SequenceStep, ...]]:
    """Decode the pre, main and post sequence sections, keyed by sequence name."""
    sequences = {}
    for name in SEQUENCE_NAMES:
        first_line = None if first_lines is None else first_lines.get(name)
        sequences[name] = decode_sequence(sections[name], catalog, first_line=first_line)
        logger.debug("decoded %d steps for %s", len(sequences[name]), name)
    return sequences
