"""Compiled document encoding, hashing and schema validation.

The document schema lives at ``psyscript/schemas/document.schema.json`` and is
loaded via ``importlib.resources``.
"""

from __future__ import annotations

import hashlib
import json
from importlib import resources
from typing import TYPE_CHECKING, Any, Union, cast

import jsonschema

from .errors import DocumentValidationError

if TYPE_CHECKING:
    from .core import CompiledScript

DOCUMENT_SCHEMA_VERSION = "1.0.0"
SCHEMA_PACKAGE = "psyscript.schemas"
SCHEMA_FILENAME = "document.schema.json"


def _schema_resource():
    return resources.files(SCHEMA_PACKAGE).joinpath(SCHEMA_FILENAME)


def load_schema() -> dict[str, Any]:
    """Load the document schema.

    Example:
        >>> load_schema()["title"]
        'psyscript compiled document'
    """
    payload = json.loads(_schema_resource().read_text(encoding="utf-8"))
    return cast(dict[str, Any], payload)


def _as_payload(document: Union["CompiledScript", dict[str, Any]]) -> dict[str, Any]:
    if isinstance(document, dict):
        return document
    return document.to_payload()


def serialize(document: Union["CompiledScript", dict[str, Any]], *, indent: Union[str, int, None] = " ") -> str:
    """Encode a document as JSON text, in source key order."""
    return json.dumps(_as_payload(document), indent=indent, ensure_ascii=False)


def canonical_json(payload: dict[str, Any]) -> str:
    """Return canonical JSON (sorted keys, compact separators).

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def document_hash(document: Union["CompiledScript", dict[str, Any]]) -> str:
    """Compute SHA-256 over the canonical JSON of a document.

    Example:
        >>> len(document_hash({"stimulus": {}, "sequences": {}}))
        64
    """
    return hashlib.sha256(canonical_json(_as_payload(document)).encode("utf-8")).hexdigest()


def document_provenance(document: Union["CompiledScript", dict[str, Any]]) -> dict[str, Any]:
    """Return a deterministic summary envelope for a document."""
    payload = _as_payload(document)
    sequences = payload.get("sequences", {})
    return {
        "document_hash": document_hash(payload),
        "schema_version": DOCUMENT_SCHEMA_VERSION,
        "stimulus_count": len(payload.get("stimulus", {})),
        "step_counts": {name: len(steps) for name, steps in sequences.items()},
    }


def validate_document(payload: dict[str, Any]) -> dict[str, Any]:
    """Validate an encoded document against the document schema.

    Raises:
        DocumentValidationError: On the first schema violation, by path.
    """
    if not isinstance(payload, dict):
        raise DocumentValidationError("Document must be a JSON object.")

    validator = jsonschema.Draft7Validator(load_schema())
    errors = sorted(validator.iter_errors(payload), key=lambda item: [str(part) for part in item.path])
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.path) or "<root>"
        raise DocumentValidationError(
            f"Document schema validation failed at {location}: {first.message}",
            path=location,
        )
    return payload


def load_document(raw: str) -> dict[str, Any]:
    """Load and validate a serialized document.

    Example:
        >>> load_document('{"stimulus": {}, "sequences": {"pre_sequence": [], "main_sequence": [], "post_sequence": []}}')["stimulus"]
        {}
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DocumentValidationError(f"Document is not valid JSON: {exc.msg}.") from exc
    return validate_document(payload)
