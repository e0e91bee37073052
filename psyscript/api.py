"""Stable public API contract for psyscript integrations."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .compiler import ScriptCompiler
from .core import CompiledScript
from .document import document_hash as _document_hash
from .document import document_provenance as _document_provenance
from .document import serialize
from .document import validate_document as _validate_document
from .options import CompileOptions

PathLike = Union[str, Path]


def compile_script(
    text: str,
    *,
    options: Optional[CompileOptions] = None,
) -> CompiledScript:
    """Compile experiment script text into a document."""
    return ScriptCompiler(text, options).compile()


def serialize_document(
    document: CompiledScript,
    *,
    indent: Union[str, int, None] = " ",
) -> str:
    """Serialize a compiled document to JSON text."""
    return serialize(document, indent=indent)


def validate_document(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Validate an encoded document against the packaged schema."""
    return _validate_document(dict(payload))


def document_hash(document: CompiledScript) -> str:
    """Return the deterministic SHA-256 hash of a compiled document."""
    return _document_hash(document)


def document_provenance(document: CompiledScript) -> dict[str, Any]:
    """Return the deterministic provenance envelope of a compiled document."""
    return _document_provenance(document)


def read_script(path: PathLike) -> str:
    """Read a script file as UTF-8 text; a leading byte order mark is dropped."""
    return Path(path).read_text(encoding="utf-8-sig")


def write_document(document: CompiledScript, path: PathLike) -> Path:
    """Write the serialized document to ``path``, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(serialize_document(document), encoding="utf-8")
    return target


def compile_file(
    path: PathLike,
    *,
    options: Optional[CompileOptions] = None,
) -> CompiledScript:
    """Read and compile a script file."""
    return compile_script(read_script(path), options=options)


__all__ = [
    "compile_file",
    "compile_script",
    "document_hash",
    "document_provenance",
    "read_script",
    "serialize_document",
    "validate_document",
    "write_document",
]
