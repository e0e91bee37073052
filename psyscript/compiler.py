"""Script compilation: section split, stimulus decoding, sequence decoding.

Example:
    >>> text = "\\n".join([
    ...     "[Descriptions]", "image I1 img/1.png", "[EndDescriptions]",
    ...     "[PreSeq]", "[EndPreSeq]",
    ...     "[MainSeq]", "0 trial1 1000 I1 inf n 0 n n n n n y", "[EndMainSeq]",
    ...     "[PostSeq]", "[EndPostSeq]",
    ... ])
    >>> ScriptCompiler(text).compile().main_sequence[0].choices[0].file_path
    'img/1.png'
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from .core import SEQUENCE_SECTIONS, STIMULUS_SECTION, CompiledScript, Stimulus
from .document import validate_document
from .lexer import locate_section, normalize
from .options import CompileOptions
from .sequences import decode_sequences
from .stimuli import decode_stimuli

logger = logging.getLogger(__name__)


class ScriptCompiler:
    """Compile one script text into a :class:`CompiledScript`.

    Each instance owns its own state; compiling never touches another
    instance or module-level data.
    """

    def __init__(self, text: str, options: Optional[CompileOptions] = None):
        self.options = options or CompileOptions()
        self.instructions = normalize(text)
        self.sections: dict[str, list[str]] = {}
        self.first_lines: dict[str, int] = {}
        self.stimuli: Mapping[str, Stimulus] = MappingProxyType({})
        self._document: Optional[CompiledScript] = None

    @property
    def is_compiled(self) -> bool:
        return self._document is not None

    def split_sections(self) -> None:
        """Extract the stimulus section and the three sequence sections."""
        keywords = {"stimulus": STIMULUS_SECTION, **SEQUENCE_SECTIONS}
        for name, keyword in keywords.items():
            start, end = locate_section(keyword, self.instructions)
            self.sections[name] = self.instructions[start + 1 : end]
            # 1-based number of the first line inside the markers.
            self.first_lines[name] = start + 2

    def compile(self) -> CompiledScript:
        """Run every stage in order and return the document.

        Raises:
            ScriptError: The first error raised by any stage; nothing partial
                is kept.
        """
        if self._document is not None:
            return self._document

        self.split_sections()
        self.stimuli = decode_stimuli(
            self.sections["stimulus"],
            strict_identifiers=self.options.strict_identifiers,
            first_line=self.first_lines["stimulus"],
        )
        sequences = decode_sequences(self.sections, self.stimuli, first_lines=self.first_lines)
        document = CompiledScript(stimuli=self.stimuli, sequences=MappingProxyType(sequences))

        if self.options.validate_output:
            validate_document(document.to_payload())

        logger.info(
            "compiled script: %d stimuli, %s",
            len(document.stimuli),
            ", ".join(f"{name}={len(steps)}" for name, steps in sequences.items()),
        )
        self._document = document
        return document
