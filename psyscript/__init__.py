"""psyscript package exports."""

from .api import (
    compile_file,
    compile_script,
    document_hash,
    document_provenance,
    read_script,
    serialize_document,
    validate_document,
    write_document,
)
from .compiler import ScriptCompiler
from .core import (
    AudioStimulus,
    CompiledScript,
    FeedbackType,
    ImageStimulus,
    SequenceStep,
    Stimulus,
    StimulusType,
    TextFileStimulus,
    TextStimulus,
    VideoStimulus,
)
from .errors import (
    DocumentValidationError,
    DuplicateStimulusIdentifierError,
    InvalidFeedbackTypeError,
    InvalidStimulusTypeError,
    MalformedInstructionError,
    ScriptError,
    SectionNotFoundError,
    UnknownStimulusIdentifierError,
)
from .lexer import extract_section, locate_section, normalize, split_escaped
from .options import CompileOptions
from .timing import Timing, TimingKind

__all__ = [
    "ScriptCompiler",
    "CompileOptions",
    "CompiledScript",
    "Stimulus",
    "StimulusType",
    "ImageStimulus",
    "TextStimulus",
    "TextFileStimulus",
    "AudioStimulus",
    "VideoStimulus",
    "SequenceStep",
    "FeedbackType",
    "Timing",
    "TimingKind",
    "normalize",
    "locate_section",
    "extract_section",
    "split_escaped",
    "ScriptError",
    "SectionNotFoundError",
    "InvalidStimulusTypeError",
    "UnknownStimulusIdentifierError",
    "InvalidFeedbackTypeError",
    "MalformedInstructionError",
    "DuplicateStimulusIdentifierError",
    "DocumentValidationError",
    "compile_file",
    "compile_script",
    "document_hash",
    "document_provenance",
    "read_script",
    "serialize_document",
    "validate_document",
    "write_document",
]
