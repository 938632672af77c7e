"""System instructions sent to the realtime model."""

from __future__ import annotations

from carevoice.state.project import ProjectConfig
from carevoice.config.prompts import PATIENT_INFO, CONTEXT_END_MARKER, CONTEXT_START_MARKER


def build_instructions(project: ProjectConfig) -> str:
    patient_info = PATIENT_INFO if project.patient_info is None else project.patient_info
    documents = "\n\n".join(
        "\n".join(
            (
                CONTEXT_START_MARKER.format(index=index, name=doc.name),
                doc.text,
                CONTEXT_END_MARKER.format(index=index),
            )
        )
        for index, doc in enumerate(project.contexts, start=1)
    )
    return f"{project.prompt}\n\nPatient Data:\n{patient_info}\n\nContext:\n{documents}"


__all__ = ["build_instructions"]
