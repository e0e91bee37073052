import math

import pytest

from psyscript.core import FeedbackType
from psyscript.errors import (
    InvalidFeedbackTypeError,
    MalformedInstructionError,
    UnknownStimulusIdentifierError,
)
from psyscript.sequences import decode_sequence, decode_sequences, decode_step, resolve_choices
from psyscript.stimuli import decode_stimuli
from psyscript.timing import Timing

from ._script_test_utils import DEFAULT_DESCRIPTIONS, step_line

CATALOG = decode_stimuli(list(DEFAULT_DESCRIPTIONS))


def test_step_fields_are_decoded_positionally():
    step = decode_step(
        "250 trial1 1000 I1,I2 inf 1 0 n tf 500 n T1 y",
        CATALOG,
    )
    assert step.on_set_time == 250
    assert step.identifier == "trial1"
    assert step.stimulus_duration == Timing.of(1000)
    assert [choice.identifier for choice in step.choices] == ["I1", "I2"]
    assert step.choice_duration.is_infinite
    assert step.answer == "1"
    assert step.choice_onset_relative_to_sim == Timing.of(0)
    assert step.reaction_time.is_none
    assert step.feedback_type is FeedbackType.TRUE_OR_FALSE
    assert step.feedback_duration.value == 500
    assert step.counts_toward_accuracy is True


def test_choices_embed_stimulus_values():
    step = decode_step(step_line(choices="I2"), CATALOG)
    assert step.to_payload()["choices"] == [
        {"stimulusType": "image", "filePath": "img/2.png", "button": True}
    ]


def test_choice_sentinel_is_kept():
    step = decode_step(step_line(choices="n"), CATALOG)
    assert step.choices is None
    assert step.to_payload()["choices"] == "n"


def test_unknown_choice_identifier_fails():
    with pytest.raises(UnknownStimulusIdentifierError) as excinfo:
        decode_step(step_line(choices="I1,I9"), CATALOG, line_number=12)
    assert excinfo.value.identifier == "I9"
    assert excinfo.value.line_number == 12
    assert excinfo.value.error_code == "SEQ_001"


def test_resolve_choices_keeps_order_and_repeats():
    resolved = resolve_choices("I2,I1,I2", CATALOG)
    assert [s.identifier for s in resolved] == ["I2", "I1", "I2"]


def test_step_identifier_need_not_be_a_stimulus():
    step = decode_step(step_line(identifier="not_a_stimulus"), CATALOG)
    assert step.identifier == "not_a_stimulus"


def test_always_feedback_attaches_both_fields():
    step = decode_step(step_line(feedback_type="a", feedback1="T1", feedback2="A1"), CATALOG)
    payload = step.to_payload()
    assert payload["feedback1"] == "T1"
    assert payload["feedback2"] == "A1"


def test_true_false_feedback_attaches_only_feedback2():
    step = decode_step(step_line(feedback_type="tf", feedback1="T1", feedback2="A1"), CATALOG)
    payload = step.to_payload()
    assert "feedback1" not in payload
    assert payload["feedback2"] == "A1"
    assert step.feedback1 is None


@pytest.mark.parametrize("feedback_type", ["n", "c"])
def test_none_and_choice_feedback_attach_nothing(feedback_type):
    step = decode_step(
        step_line(feedback_type=feedback_type, feedback1="T1", feedback2="A1"), CATALOG
    )
    payload = step.to_payload()
    assert "feedback1" not in payload
    assert "feedback2" not in payload


@pytest.mark.parametrize("feedback_type", ["x", "A", "tf,a", "none"])
def test_invalid_feedback_type_fails(feedback_type):
    with pytest.raises(InvalidFeedbackTypeError) as excinfo:
        decode_step(step_line(feedback_type=feedback_type), CATALOG)
    assert excinfo.value.feedback_type == feedback_type


def test_wrong_field_count_is_malformed():
    with pytest.raises(MalformedInstructionError):
        decode_step("0 s1 1000 n n n", CATALOG)
    with pytest.raises(MalformedInstructionError):
        decode_step(step_line() + " extra", CATALOG)


def test_non_numeric_timing_is_malformed():
    with pytest.raises(MalformedInstructionError):
        decode_step(step_line(stimulus_duration="long"), CATALOG)


def test_onset_must_be_numeric():
    with pytest.raises(MalformedInstructionError):
        decode_step(step_line(on_set_time="n"), CATALOG)


def test_fractional_timings_stay_floats():
    step = decode_step(step_line(on_set_time="12.5", reaction_time="1.25"), CATALOG)
    assert step.on_set_time == 12.5
    assert step.reaction_time.to("s") == pytest.approx(0.00125)


def test_infinite_timing_converts_to_math_inf():
    step = decode_step(step_line(stimulus_duration="inf"), CATALOG)
    assert step.stimulus_duration.to("ms") == math.inf
    assert step.to_payload()["stimulusDuration"] == "inf"


def test_sequence_keeps_source_order_and_skips_blank_lines():
    steps = decode_sequence(
        [step_line(identifier="b"), "", step_line(identifier="a")], CATALOG
    )
    assert [step.identifier for step in steps] == ["b", "a"]


def test_decode_sequences_reports_source_line_numbers():
    sections = {
        "pre_sequence": [],
        "main_sequence": [step_line(), step_line(choices="ZZ")],
        "post_sequence": [],
    }
    with pytest.raises(UnknownStimulusIdentifierError) as excinfo:
        decode_sequences(sections, CATALOG, first_lines={"main_sequence": 20})
    assert excinfo.value.line_number == 21


def test_step_payload_uses_camel_case_keys_in_source_order():
    payload = decode_step(step_line(feedback_type="a", feedback1="T1", feedback2="A1"), CATALOG).to_payload()
    assert list(payload) == [
        "onSetTime",
        "identifier",
        "stimulusDuration",
        "choices",
        "choiceDuration",
        "answer",
        "choiceOnsetRelativeToSim",
        "reactionTime",
        "feedbackType",
        "feedbackDuration",
        "test",
        "feedback1",
        "feedback2",
    ]
