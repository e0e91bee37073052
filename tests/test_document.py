import json

import pytest

from psyscript.compiler import ScriptCompiler
from psyscript.document import (
    DOCUMENT_SCHEMA_VERSION,
    canonical_json,
    document_hash,
    document_provenance,
    load_document,
    load_schema,
    serialize,
    validate_document,
)
from psyscript.errors import DocumentValidationError

from ._script_test_utils import EXAMPLE_SCRIPT, build_script, step_line


def _document():
    return ScriptCompiler(EXAMPLE_SCRIPT.read_text(encoding="utf-8")).compile()


def test_serialized_document_has_stimulus_and_sequences_members():
    payload = json.loads(serialize(_document()))
    assert list(payload) == ["stimulus", "sequences"]
    assert list(payload["sequences"]) == ["pre_sequence", "main_sequence", "post_sequence"]
    assert payload["stimulus"]["I2"] == {
        "stimulusType": "image",
        "filePath": "img/2.png",
        "button": True,
    }


def test_serialize_uses_single_space_indent_by_default():
    text = serialize(_document())
    assert text.startswith('{\n "stimulus": {')


def test_serialized_choices_are_embedded_stimuli():
    payload = json.loads(serialize(_document()))
    trial1 = payload["sequences"]["main_sequence"][0]
    assert trial1["choices"][0]["filePath"] == "img/2.png"
    assert trial1["feedback2"] == "WRONG"
    assert "feedback1" not in trial1


def test_compiled_documents_validate_against_schema():
    payload = _document().to_payload()
    assert validate_document(payload) is payload


def test_schema_rejects_unknown_feedback_type():
    payload = _document().to_payload()
    payload["sequences"]["main_sequence"][0]["feedbackType"] = "z"
    with pytest.raises(DocumentValidationError) as excinfo:
        validate_document(payload)
    assert excinfo.value.path.startswith("sequences.main_sequence.0")
    assert excinfo.value.error_code == "DOC_001"


def test_schema_rejects_missing_sequence():
    payload = _document().to_payload()
    del payload["sequences"]["post_sequence"]
    with pytest.raises(DocumentValidationError):
        validate_document(payload)


def test_load_document_round_trips_serialized_text():
    document = _document()
    assert load_document(serialize(document)) == document.to_payload()


def test_load_document_rejects_invalid_json():
    with pytest.raises(DocumentValidationError):
        load_document("{not json")


def test_canonical_json_is_key_order_independent():
    assert canonical_json({"b": 1, "a": [1, 2]}) == canonical_json({"a": [1, 2], "b": 1})


def test_document_hash_accepts_document_or_payload():
    document = _document()
    assert document_hash(document) == document_hash(document.to_payload())


def test_document_hash_changes_with_content():
    first = ScriptCompiler(build_script(main=[step_line(on_set_time="0")])).compile()
    second = ScriptCompiler(build_script(main=[step_line(on_set_time="1")])).compile()
    assert document_hash(first) != document_hash(second)


def test_document_provenance_summarizes_counts():
    provenance = document_provenance(_document())
    assert provenance["schema_version"] == DOCUMENT_SCHEMA_VERSION
    assert provenance["stimulus_count"] == 9
    assert provenance["step_counts"] == {"pre_sequence": 2, "main_sequence": 3, "post_sequence": 1}
    assert len(provenance["document_hash"]) == 64


def test_schema_resource_is_packaged():
    assert load_schema()["title"] == "psyscript compiled document"
