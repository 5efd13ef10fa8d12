"""State transitions for multi-step generation progress.

Every function takes an explicit :class:`GenerationProgress` and returns a new
one; the input is never mutated. Invalid calls raise :class:`StateViolation`
before anything is built, so a rejected call leaves the caller's record exactly
as it was.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..errors import StateViolation
from ..hashing import content_hash
from ..workflows.models import WorkflowDefinition
from .models import (
    GenerationProgress,
    ProgressSummary,
    SequencerState,
    StepRecord,
    WorkflowOptions,
)

logger = logging.getLogger(__name__)


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _evolve(progress: GenerationProgress, **changes: Any) -> GenerationProgress:
    data = progress.model_dump()
    data.update(changes)
    return GenerationProgress.model_validate(data)


def _ensure_mutable(progress: GenerationProgress, operation: str) -> None:
    if progress.is_finished:
        raise StateViolation(operation, "workflow has been finished")


def _ensure_definition(
    progress: GenerationProgress, definition: WorkflowDefinition, operation: str
) -> None:
    if progress.workflow_kind != definition.kind:
        raise StateViolation(
            operation,
            f"progress belongs to '{progress.workflow_kind}', not '{definition.kind}'",
        )
    if progress.total_steps != definition.total_steps:
        raise StateViolation(
            operation,
            f"progress expects {progress.total_steps} steps, definition has {definition.total_steps}",
        )


def _advance(
    progress: GenerationProgress, now: datetime, **changes: Any
) -> GenerationProgress:
    next_index = progress.current_step_index + 1
    complete = next_index == progress.total_steps
    return _evolve(
        progress,
        current_step_index=next_index,
        is_complete=complete,
        completed_at=now if complete else None,
        **changes,
    )


def new_progress(
    definition: WorkflowDefinition,
    document_id: str,
    options: Optional[WorkflowOptions] = None,
    now: Optional[datetime] = None,
) -> GenerationProgress:
    """Create a fresh checkpoint positioned at the first step."""
    return GenerationProgress(
        workflow_kind=definition.kind,
        document_id=document_id,
        total_steps=definition.total_steps,
        started_at=_now(now),
        options=options or WorkflowOptions(),
    )


def complete_step(
    progress: GenerationProgress,
    definition: WorkflowDefinition,
    step_id: str,
    input_fields: Dict[str, str],
    generated_content: str,
    now: Optional[datetime] = None,
) -> GenerationProgress:
    """Store content for the current step and move to the next one."""

    operation = "complete_step"
    _ensure_mutable(progress, operation)
    _ensure_definition(progress, definition, operation)
    if progress.is_complete:
        raise StateViolation(operation, "all steps are already complete")
    current = definition.step_at(progress.current_step_index)
    if current is None or current.id != step_id:
        expected = current.id if current else None
        raise StateViolation(
            operation, f"step '{step_id}' is not the current step (expected '{expected}')"
        )

    stamp = _now(now)
    record = StepRecord(
        step_id=step_id,
        input_fields=dict(input_fields),
        generated_content=generated_content,
        completed_at=stamp,
        was_modified=False,
        content_hash=content_hash(generated_content),
    )
    completed_ids = list(progress.completed_step_ids)
    if step_id not in completed_ids:
        completed_ids.append(step_id)
    records = dict(progress.step_records)
    records[step_id] = record

    logger.debug(f"Completed step {step_id} for document {progress.document_id}")
    return _advance(
        progress, stamp, completed_step_ids=completed_ids, step_records=records
    )


def skip_step(
    progress: GenerationProgress,
    definition: WorkflowDefinition,
    now: Optional[datetime] = None,
) -> GenerationProgress:
    """Move past the current step without producing content for it."""

    operation = "skip_step"
    _ensure_mutable(progress, operation)
    _ensure_definition(progress, definition, operation)
    if progress.is_complete:
        raise StateViolation(operation, "all steps are already complete")
    skipped = definition.step_at(progress.current_step_index)
    logger.debug(
        f"Skipped step {skipped.id if skipped else progress.current_step_index} "
        f"for document {progress.document_id}"
    )
    return _advance(progress, _now(now))


def rewind(
    progress: GenerationProgress, definition: WorkflowDefinition
) -> GenerationProgress:
    """Step back one position; stored content is left untouched."""

    operation = "rewind"
    _ensure_mutable(progress, operation)
    _ensure_definition(progress, definition, operation)
    if progress.current_step_index == 0:
        raise StateViolation(operation, "already at the first step")
    logger.debug(f"Rewound document {progress.document_id} from step {progress.current_step_index}")
    return _evolve(
        progress,
        current_step_index=progress.current_step_index - 1,
        is_complete=False,
        completed_at=None,
    )


def regenerate_at(
    progress: GenerationProgress, definition: WorkflowDefinition, step_id: str
) -> GenerationProgress:
    """Reposition on ``step_id`` so it can be generated again.

    The existing record stays in place until the next ``complete_step`` for
    that step overwrites it.
    """

    operation = "regenerate_at"
    _ensure_mutable(progress, operation)
    _ensure_definition(progress, definition, operation)
    index = definition.index_of(step_id)
    if index < 0:
        raise StateViolation(operation, f"unknown step '{step_id}'")
    logger.debug(f"Regenerating step {step_id} for document {progress.document_id}")
    return _evolve(
        progress, current_step_index=index, is_complete=False, completed_at=None
    )


def finish(
    progress: GenerationProgress, now: Optional[datetime] = None
) -> GenerationProgress:
    """Record the operator's acknowledgement that the workflow is done."""

    operation = "finish"
    _ensure_mutable(progress, operation)
    if not progress.is_complete:
        raise StateViolation(operation, "not every step has been passed yet")
    return _evolve(progress, finished_at=_now(now))


def mark_modified(
    progress: GenerationProgress, step_id: str, current_content: str
) -> GenerationProgress:
    """Flag ``step_id`` as edited when ``current_content`` no longer matches.

    Returns an unchanged copy when the content still matches the stored
    fingerprint. The flag is never cleared here; a new ``complete_step``
    resets it.
    """

    operation = "mark_modified"
    _ensure_mutable(progress, operation)
    record = progress.step_records.get(step_id)
    if record is None:
        raise StateViolation(operation, f"step '{step_id}' has no generated content")
    if record.was_modified or content_hash(current_content) == record.content_hash:
        return progress.model_copy(deep=True)
    records = dict(progress.step_records)
    records[step_id] = record.model_copy(update={"was_modified": True})
    logger.debug(f"Step {step_id} of document {progress.document_id} was edited")
    return _evolve(progress, step_records=records)


def progress_summary(
    progress: Optional[GenerationProgress], definition: WorkflowDefinition
) -> ProgressSummary:
    if progress is None:
        first = definition.step_at(0)
        return ProgressSummary(
            state=SequencerState.NOT_STARTED,
            completed=0,
            total=definition.total_steps,
            percent=0,
            current_step_id=first.id if first else None,
            current_step_name=first.name if first else None,
        )

    current = definition.step_at(progress.current_step_index)
    passed = definition.steps[: progress.current_step_index]
    completed = len(progress.completed_step_ids)
    return ProgressSummary(
        state=progress.state,
        completed=completed,
        total=progress.total_steps,
        percent=round(100 * completed / progress.total_steps),
        current_step_id=current.id if current else None,
        current_step_name=current.name if current else None,
        skipped_step_ids=[s.id for s in passed if s.id not in progress.step_records],
        modified_step_ids=[
            step_id
            for step_id, record in progress.step_records.items()
            if record.was_modified
        ],
    )
