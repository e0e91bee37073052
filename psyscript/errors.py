"""Script compilation error taxonomy.

Every failure raised while compiling a script derives from :class:`ScriptError`
and carries a stable ``error_code`` so tooling can react without parsing
messages.

Example:
    >>> from psyscript.errors import SectionNotFoundError
    >>> err = SectionNotFoundError("PreSeq", missing="[EndPreSeq]")
    >>> err.error_code
    'SEC_001'
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ScriptError(Exception):
    """Base psyscript compilation error.

    Attributes:
        error_code: Stable error identifier.
        description: Human-readable error description.
        instruction: Offending script line, when one exists.
        line_number: 1-based line number in the source script, when known.
        remediation_hint: Instruction for fixing the script.

    Example:
        >>> err = ScriptError("LIN_001", "bad line", instruction="x", line_number=3)
        >>> err.to_dict()["line_number"]
        3
    """

    error_code: str
    description: str
    instruction: Optional[str] = None
    line_number: Optional[int] = None
    remediation_hint: str = ""

    def __post_init__(self) -> None:
        super().__init__(self.description)

    def __str__(self) -> str:
        if self.line_number is None:
            return self.description
        return f"line {self.line_number}: {self.description}"

    def to_dict(self) -> dict[str, Any]:
        """Return serializable error details."""
        return {
            "error_code": self.error_code,
            "description": self.description,
            "instruction": self.instruction,
            "line_number": self.line_number,
            "remediation_hint": self.remediation_hint,
        }

    def to_payload(self) -> str:
        """Serialize the error as sorted, indented JSON.

        Example:
            >>> '"error_code": "LIN_001"' in ScriptError("LIN_001", "bad").to_payload()
            True
        """
        return json.dumps(self.to_dict(), sort_keys=True, indent=2)


class SectionNotFoundError(ScriptError):
    """Raised when a required section's start or end marker is missing."""

    def __init__(self, keyword: str, *, missing: str, misordered: bool = False):
        if misordered:
            description = (
                f"Section '{keyword}' end marker [End{keyword}] appears before "
                f"its start marker [{keyword}]."
            )
        else:
            description = f"Section '{keyword}' could not be extracted: {missing} not found."
        super().__init__(
            error_code="SEC_002" if misordered else "SEC_001",
            description=description,
            remediation_hint=(
                f"Enclose the section between a [{keyword}] line and a "
                f"later [End{keyword}] line."
            ),
        )
        self.keyword = keyword
        self.missing = missing


class InvalidStimulusTypeError(ScriptError):
    """Raised when a stimulus line's type tag is not a supported variant."""

    def __init__(self, stimulus_type: str, *, instruction: str, line_number: Optional[int] = None):
        super().__init__(
            error_code="STM_001",
            description=f"'{stimulus_type}' is not a valid stimulus type.",
            instruction=instruction,
            line_number=line_number,
            remediation_hint="Use one of: image, text, text_file, audio, video.",
        )
        self.stimulus_type = stimulus_type


class DuplicateStimulusIdentifierError(ScriptError):
    """Raised in strict mode when a stimulus identifier is declared twice."""

    def __init__(self, identifier: str, *, instruction: str, line_number: Optional[int] = None):
        super().__init__(
            error_code="STM_002",
            description=f"Stimulus identifier '{identifier}' is declared more than once.",
            instruction=instruction,
            line_number=line_number,
            remediation_hint=f"Rename or remove the repeated '{identifier}' description.",
        )
        self.identifier = identifier


class UnknownStimulusIdentifierError(ScriptError):
    """Raised when a sequence step references an undeclared stimulus."""

    def __init__(self, identifier: str, *, instruction: str, line_number: Optional[int] = None):
        super().__init__(
            error_code="SEQ_001",
            description=f"Stimulus identifier '{identifier}' is not declared in [Descriptions].",
            instruction=instruction,
            line_number=line_number,
            remediation_hint=f"Declare '{identifier}' in the [Descriptions] section.",
        )
        self.identifier = identifier


class InvalidFeedbackTypeError(ScriptError):
    """Raised when a sequence step's feedback type is not n, tf, a or c."""

    def __init__(self, feedback_type: str, *, instruction: str, line_number: Optional[int] = None):
        super().__init__(
            error_code="SEQ_002",
            description=f"'{feedback_type}' is not a valid feedback type.",
            instruction=instruction,
            line_number=line_number,
            remediation_hint="Use one of: n, tf, a, c.",
        )
        self.feedback_type = feedback_type


class MalformedInstructionError(ScriptError):
    """Raised when a line has the wrong shape or an unparsable field."""

    def __init__(
        self,
        description: str,
        *,
        instruction: str,
        line_number: Optional[int] = None,
        remediation_hint: str = "",
    ):
        super().__init__(
            error_code="LIN_001",
            description=description,
            instruction=instruction,
            line_number=line_number,
            remediation_hint=remediation_hint,
        )


class DocumentValidationError(ScriptError):
    """Raised when an encoded document does not match the document schema."""

    def __init__(self, description: str, *, path: str = "<root>"):
        super().__init__(
            error_code="DOC_001",
            description=description,
            remediation_hint="Regenerate the document with psyscript compile.",
        )
        self.path = path
