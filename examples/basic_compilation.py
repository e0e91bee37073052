from pathlib import Path

from psyscript import compile_file, document_provenance, serialize_document

SCRIPT = Path(__file__).resolve().parent / "scripts" / "wm_task.txt"


def main() -> None:
    document = compile_file(SCRIPT)

    print("\n[Stimuli]")
    for identifier, stimulus in document.stimuli.items():
        print(f"{identifier}: {stimulus.stimulus_type.value}")

    print("\n[Main sequence]")
    for step in document.main_sequence:
        choices = "n" if step.choices is None else ",".join(s.identifier for s in step.choices)
        print(f"{step.on_set_time} {step.identifier} choices={choices} feedback={step.feedback_type.value}")

    print("\n[Provenance]")
    print(document_provenance(document))

    print("\n[Document]")
    print(serialize_document(document))


if __name__ == "__main__":
    main()
