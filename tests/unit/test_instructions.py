from __future__ import annotations

from carevoice.state import ProjectConfig, ReferenceDocument
from carevoice.config.prompts import PATIENT_INFO
from carevoice.session.instructions import build_instructions


def test_reference_documents_are_delimited_and_numbered() -> None:
    project = ProjectConfig(
        id="p1",
        prompt="You are a COPD patient.",
        llm_model="openai:gpt-realtime-2025-08-28",
        contexts=(
            ReferenceDocument(name="Vitals", text="RR 26"),
            ReferenceDocument(name="ABG", text="pH 7.18"),
        ),
        patient_info="Known case of COPD",
    )

    assert build_instructions(project) == (
        "You are a COPD patient.\n\n"
        "Patient Data:\nKnown case of COPD\n\n"
        "Context:\n"
        "==== START CONTEXT 1 : Vitals ====\nRR 26\n==== END Context 1 ====\n\n"
        "==== START CONTEXT 2 : ABG ====\npH 7.18\n==== END Context 2 ===="
    )


def test_default_patient_info_is_used() -> None:
    project = ProjectConfig(id="p1", prompt="Prompt", llm_model="m")
    assert build_instructions(project) == f"Prompt\n\nPatient Data:\n{PATIENT_INFO}\n\nContext:\n"


def test_project_from_payload() -> None:
    project = ProjectConfig.from_payload(
        {
            "id": 7,
            "name": "COPD",
            "prompt": {"content": "Be a patient"},
            "llmModel": "openai:gpt-realtime-2025-08-28",
            "contexts": [{"name": "Notes", "text": "on NIV"}],
        }
    )
    assert project.id == "7"
    assert project.prompt == "Be a patient"
    assert project.contexts == (ReferenceDocument(name="Notes", text="on NIV"),)
