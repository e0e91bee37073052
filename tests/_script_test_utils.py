from __future__ import annotations

from pathlib import Path
from typing import Sequence

ROOT = Path(__file__).resolve().parents[1]
EXAMPLE_SCRIPT = ROOT / "examples" / "scripts" / "wm_task.txt"

DEFAULT_DESCRIPTIONS = (
    "image I1 img/1.png",
    "image I2 img/2.png true",
    'text T1 "hello world" n n',
    "audio A1 audio/beep.wav",
)


def build_script(
    descriptions: Sequence[str] = DEFAULT_DESCRIPTIONS,
    pre: Sequence[str] = (),
    main: Sequence[str] = (),
    post: Sequence[str] = (),
    *,
    title: str = "Test Experiment",
) -> str:
    lines = [title, "", "[Descriptions]", *descriptions, "[EndDescriptions]", ""]
    for keyword, body in (("PreSeq", pre), ("MainSeq", main), ("PostSeq", post)):
        lines.extend([f"[{keyword}]", *body, f"[End{keyword}]"])
    return "\n".join(lines)


def step_line(
    *,
    on_set_time: str = "0",
    identifier: str = "s1",
    stimulus_duration: str = "1000",
    choices: str = "n",
    choice_duration: str = "n",
    answer: str = "n",
    choice_onset: str = "0",
    reaction_time: str = "n",
    feedback_type: str = "n",
    feedback_duration: str = "n",
    feedback1: str = "n",
    feedback2: str = "n",
    test: str = "n",
) -> str:
    return " ".join(
        [
            on_set_time,
            identifier,
            stimulus_duration,
            choices,
            choice_duration,
            answer,
            choice_onset,
            reaction_time,
            feedback_type,
            feedback_duration,
            feedback1,
            feedback2,
            test,
        ]
    )
