"""Core entities produced by compiling an experiment script.

Example:
    >>> from psyscript.core import ImageStimulus
    >>> ImageStimulus(identifier="I1", file_path="img/3.png", button=True).to_payload()
    {'stimulusType': 'image', 'filePath': 'img/3.png', 'button': True}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Literal, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator
from pydantic.alias_generators import to_camel

from .timing import Timing

STIMULUS_SECTION = "Descriptions"
SEQUENCE_SECTIONS: Mapping[str, str] = MappingProxyType(
    {
        "pre_sequence": "PreSeq",
        "main_sequence": "MainSeq",
        "post_sequence": "PostSeq",
    }
)
SEQUENCE_NAMES: Tuple[str, ...] = tuple(SEQUENCE_SECTIONS)


class StimulusType(str, Enum):
    """Type tags accepted by the stimulus grammar."""

    IMAGE = "image"
    TEXT = "text"
    TEXT_FILE = "text_file"
    AUDIO = "audio"
    VIDEO = "video"
    INSTRUCTION = "instruction"
    RESULT = "result"


class FeedbackType(str, Enum):
    """Feedback shown after a sequence step."""

    NONE = "n"
    TRUE_OR_FALSE = "tf"
    ALWAYS = "a"
    CHOICE = "c"


# Feedback fields attached to a step for each feedback type.
FEEDBACK_FIELDS: Mapping[FeedbackType, FrozenSet[str]] = MappingProxyType(
    {
        FeedbackType.ALWAYS: frozenset({"feedback1", "feedback2"}),
        FeedbackType.TRUE_OR_FALSE: frozenset({"feedback2"}),
        FeedbackType.NONE: frozenset(),
        FeedbackType.CHOICE: frozenset(),
    }
)


class Stimulus(BaseModel):
    """Identifier-keyed asset descriptor.

    ``identifier`` is kept on the entity for lookups and error reporting but is
    not part of its encoded form; the catalog key carries it.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    stimulus_type: StimulusType
    identifier: str = Field(exclude=True)

    def to_payload(self) -> Dict[str, Any]:
        """Return the camelCase encoding of this stimulus."""
        return self.model_dump(mode="json", by_alias=True)


class ImageStimulus(Stimulus):
    """Image file, optionally shown with a response button."""

    stimulus_type: Literal[StimulusType.IMAGE] = StimulusType.IMAGE
    file_path: str
    button: bool = False


class TextStimulus(Stimulus):
    """Inline text. ``None`` font settings mean the runtime default."""

    stimulus_type: Literal[StimulusType.TEXT] = StimulusType.TEXT
    content: str
    font_size: Optional[int] = None
    font_color: Optional[str] = None


class TextFileStimulus(Stimulus):
    """Text loaded from a file by the runtime."""

    stimulus_type: Literal[StimulusType.TEXT_FILE] = StimulusType.TEXT_FILE
    file_path: str
    font_size: Optional[int] = None
    font_color: Optional[str] = None


class AudioStimulus(Stimulus):
    stimulus_type: Literal[StimulusType.AUDIO] = StimulusType.AUDIO
    file_path: str


class VideoStimulus(Stimulus):
    stimulus_type: Literal[StimulusType.VIDEO] = StimulusType.VIDEO
    file_path: str


# ``instruction`` and ``result`` have no field layout and are absent on purpose.
STIMULUS_MODELS: Mapping[StimulusType, Type[Stimulus]] = MappingProxyType(
    {
        StimulusType.IMAGE: ImageStimulus,
        StimulusType.TEXT: TextStimulus,
        StimulusType.TEXT_FILE: TextFileStimulus,
        StimulusType.AUDIO: AudioStimulus,
        StimulusType.VIDEO: VideoStimulus,
    }
)


class SequenceStep(BaseModel):
    """One timed trial event of a pre, main or post sequence.

    Parameters:
        on_set_time: Onset in milliseconds.
        identifier: Step label; need not name a stimulus.
        stimulus_duration: Stimulus display duration.
        choices: Resolved choice stimuli, or ``None`` for the ``n`` sentinel.
        choice_duration: Choice display duration.
        answer: Opaque answer token (choice index or ``n``).
        choice_onset_relative_to_sim: Choice onset relative to the stimulus.
        reaction_time: Allowed reaction time.
        feedback_type: Which feedback, if any, follows the step.
        feedback_duration: Feedback display duration.
        feedback1: Set only for ``a`` feedback.
        feedback2: Set for ``a`` and ``tf`` feedback.
        test: ``y`` when the step counts toward accuracy scoring.

    Raises:
        pydantic.ValidationError: If feedback fields disagree with ``feedback_type``.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    on_set_time: Union[int, float]
    identifier: str
    stimulus_duration: Timing
    choices: Optional[Tuple[Stimulus, ...]]
    choice_duration: Timing
    answer: str
    choice_onset_relative_to_sim: Timing
    reaction_time: Timing
    feedback_type: FeedbackType
    feedback_duration: Timing
    test: str
    feedback1: Optional[str] = None
    feedback2: Optional[str] = None

    @model_validator(mode="after")
    def _check_feedback_fields(self) -> "SequenceStep":
        attached = FEEDBACK_FIELDS[self.feedback_type]
        for name in ("feedback1", "feedback2"):
            present = getattr(self, name) is not None
            if present != (name in attached):
                raise ValueError(
                    f"{name} must {'' if name in attached else 'not '}be set for "
                    f"feedback type '{self.feedback_type.value}'."
                )
        return self

    @field_serializer(
        "stimulus_duration",
        "choice_duration",
        "choice_onset_relative_to_sim",
        "reaction_time",
        "feedback_duration",
    )
    def _serialize_timing(self, value: Timing) -> Union[str, int, float]:
        return value.to_json()

    @field_serializer("choices")
    def _serialize_choices(self, value: Optional[Tuple[Stimulus, ...]]) -> Any:
        if value is None:
            return "n"
        return [stimulus.to_payload() for stimulus in value]

    @property
    def counts_toward_accuracy(self) -> bool:
        return self.test == "y"

    def to_payload(self) -> Dict[str, Any]:
        """Return the camelCase encoding, with only the attached feedback fields."""
        payload = self.model_dump(mode="json", by_alias=True, exclude={"feedback1", "feedback2"})
        for name in ("feedback1", "feedback2"):
            if name in FEEDBACK_FIELDS[self.feedback_type]:
                payload[name] = getattr(self, name)
        return payload


@dataclass(frozen=True)
class CompiledScript:
    """Compiled document: the stimulus catalog and the three sequences."""

    stimuli: Mapping[str, Stimulus]
    sequences: Mapping[str, Tuple[SequenceStep, ...]]

    def stimulus(self, identifier: str) -> Stimulus:
        """Return the stimulus declared as ``identifier``.

        Raises:
            KeyError: If no stimulus has that identifier.
        """
        return self.stimuli[identifier]

    @property
    def pre_sequence(self) -> Tuple[SequenceStep, ...]:
        return self.sequences["pre_sequence"]

    @property
    def main_sequence(self) -> Tuple[SequenceStep, ...]:
        return self.sequences["main_sequence"]

    @property
    def post_sequence(self) -> Tuple[SequenceStep, ...]:
        return self.sequences["post_sequence"]

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready document with ``stimulus`` and ``sequences`` members."""
        return {
            "stimulus": {
                identifier: stimulus.to_payload() for identifier, stimulus in self.stimuli.items()
            },
            "sequences": {
                name: [step.to_payload() for step in self.sequences[name]]
                for name in SEQUENCE_NAMES
            },
        }
