"""Compile-time options for script compilation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

STRICT_IDENTIFIERS_ENV = "PSYSCRIPT_STRICT_IDENTIFIERS"
VALIDATE_OUTPUT_ENV = "PSYSCRIPT_VALIDATE_OUTPUT"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class CompileOptions:
    """Switches that tighten compilation beyond the script grammar.

    Attributes:
        strict_identifiers: Reject repeated stimulus identifiers instead of
            keeping the last description.
        validate_output: Check the compiled document against the document
            schema before returning it.
    """

    strict_identifiers: bool = False
    validate_output: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CompileOptions":
        """Read options from ``PSYSCRIPT_*`` environment variables.

        Example:
            >>> CompileOptions.from_env({"PSYSCRIPT_STRICT_IDENTIFIERS": "yes"}).strict_identifiers
            True
        """
        env = os.environ if environ is None else environ
        return cls(
            strict_identifiers=_env_flag(env, STRICT_IDENTIFIERS_ENV),
            validate_output=_env_flag(env, VALIDATE_OUTPUT_ENV),
        )
