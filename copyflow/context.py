"""Chaining of earlier step output into later generation requests."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .sequencer.models import GenerationProgress, WorkflowOptions
from .workflows.models import WorkflowDefinition

EXCERPT_ELLIPSIS = "…"


class GenerationRequest(BaseModel):
    """Payload handed to the external generation call for one step."""

    workflow_step_id: str
    input_fields: Dict[str, str] = Field(default_factory=dict)
    context_digest: str = ""
    options: WorkflowOptions = Field(default_factory=WorkflowOptions)


def _excerpt(content: str, max_chars: Optional[int]) -> str:
    if max_chars is None or len(content) <= max_chars:
        return content
    return content[:max_chars].rstrip() + EXCERPT_ELLIPSIS


def build_context_digest(
    progress: GenerationProgress,
    definition: WorkflowDefinition,
    max_excerpt_chars: Optional[int] = None,
) -> str:
    """Return the labelled content of every step before the current one.

    Excerpts follow canonical step order rather than completion order, so a
    regenerated step keeps its original position. Steps without content are
    skipped.
    """

    parts: List[str] = []
    for index, step in enumerate(definition.steps):
        if index >= progress.current_step_index:
            break
        record = progress.step_records.get(step.id)
        if record is None or not record.generated_content:
            continue
        excerpt = _excerpt(record.generated_content, max_excerpt_chars)
        parts.append(f"=== {step.name} ===\n{excerpt}")
    return "\n\n".join(parts)


def build_document_content(
    progress: GenerationProgress, definition: WorkflowDefinition
) -> str:
    """Assemble the full document from every step that has content."""

    parts: List[str] = []
    for step in definition.steps:
        record = progress.step_records.get(step.id)
        if record is None or not record.generated_content:
            continue
        parts.append(f"<h2>{step.name}</h2>")
        parts.append(record.generated_content)
    return definition.section_separator.join(parts)


def build_generation_request(
    progress: GenerationProgress,
    definition: WorkflowDefinition,
    step_id: str,
    input_fields: Dict[str, str],
    max_excerpt_chars: Optional[int] = None,
) -> GenerationRequest:
    return GenerationRequest(
        workflow_step_id=step_id,
        input_fields=dict(input_fields),
        context_digest=build_context_digest(progress, definition, max_excerpt_chars),
        options=progress.options,
    )
