"""Resumable section-by-section generation driver."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from .. import context
from ..config import CopyflowConfig, load_config
from ..errors import IncompatibleWorkflow, PersistenceUnavailable, StateViolation
from ..persistence import ProgressRepository, get_repository
from ..workflows.models import WorkflowDefinition
from . import transitions
from .models import GenerationProgress, ProgressSummary, SequencerState, WorkflowOptions

logger = logging.getLogger(__name__)


class SectionSequencer:
    """Walks a workflow's steps for one document and checkpoints every move.

    Each mutating operation applies a pure transition to the in-memory
    progress and then writes the whole record once through the repository.
    The store is read only by ``start`` and ``load``; later operations work
    from the in-memory progress without re-reading it. Concurrent writers to
    the same document are not reconciled; the last write wins.
    """

    def __init__(
        self,
        definition: WorkflowDefinition,
        document_id: str,
        repository: ProgressRepository | None = None,
        clock: Optional[Callable[[], datetime]] = None,
        config: Optional[CopyflowConfig] = None,
    ) -> None:
        self.definition = definition
        self.document_id = document_id
        self._repository = repository or get_repository()
        self._clock = clock
        self.config = config or load_config()
        self.progress: GenerationProgress | None = None

    @property
    def state(self) -> SequencerState:
        if self.progress is None:
            return SequencerState.NOT_STARTED
        return self.progress.state

    def summary(self) -> ProgressSummary:
        return transitions.progress_summary(self.progress, self.definition)

    def _now(self) -> Optional[datetime]:
        return self._clock() if self._clock else None

    def _require_progress(self, operation: str) -> GenerationProgress:
        if self.progress is None:
            raise StateViolation(operation, "no progress loaded; call start() or load() first")
        return self.progress

    # ------------------------------------------------------------------
    # Repository access
    async def _read(self) -> str | None:
        try:
            return await self._repository.load(self.document_id)
        except Exception as e:
            logger.warning(f"Failed to read progress for document {self.document_id}: {e}")
            raise PersistenceUnavailable(self.document_id, "read", self.progress) from e

    async def _commit(self, progress: GenerationProgress, operation: str) -> GenerationProgress:
        self.progress = progress
        try:
            await self._repository.save(self.document_id, progress.to_json())
        except Exception as e:
            logger.warning(
                f"Failed to save progress after {operation} for document {self.document_id}: {e}"
            )
            raise PersistenceUnavailable(self.document_id, "save", progress) from e
        return progress

    def _check_kind(self, progress: GenerationProgress) -> None:
        if progress.workflow_kind != self.definition.kind:
            raise IncompatibleWorkflow(
                self.document_id, self.definition.kind, progress.workflow_kind
            )

    # ------------------------------------------------------------------
    # Lifecycle
    async def start(
        self, options: Optional[WorkflowOptions] = None, replace: bool = False
    ) -> GenerationProgress:
        """Begin a new workflow for the document at the first step.

        When the store cannot be read the new progress is still created and
        kept in memory; the failed save that follows raises
        ``PersistenceUnavailable`` carrying it.

        Raises:
            StateViolation: If progress already exists and ``replace`` is false.
        """
        try:
            existing = await self._read()
        except PersistenceUnavailable:
            existing = None
        if existing is not None and not replace:
            raise StateViolation(
                "start", f"document {self.document_id} already has progress"
            )
        progress = transitions.new_progress(
            self.definition, self.document_id, options, self._now()
        )
        logger.info(
            f"Started workflow {self.definition.kind} for document {self.document_id}"
        )
        return await self._commit(progress, "start")

    async def load(self) -> GenerationProgress | None:
        """Fetch stored progress compatible with this workflow.

        Missing, incompatible, or unreadable records all mean there is
        nothing to resume; the caller should ``start`` fresh.
        """
        payload = await self._read()
        if payload is None:
            self.progress = None
            return None
        try:
            progress = GenerationProgress.from_json(payload)
            self._check_kind(progress)
        except IncompatibleWorkflow as e:
            logger.warning(f"Nothing to resume: {e}")
            self.progress = None
            return None
        except ValidationError as e:
            logger.warning(
                f"Ignoring invalid stored progress for document {self.document_id}: {e}"
            )
            self.progress = None
            return None
        if progress.total_steps != self.definition.total_steps:
            logger.warning(
                f"Stored progress for document {self.document_id} has "
                f"{progress.total_steps} steps, workflow defines "
                f"{self.definition.total_steps}; nothing to resume"
            )
            self.progress = None
            return None
        self.progress = progress
        logger.info(
            f"Resumed workflow {progress.workflow_kind} for document "
            f"{self.document_id} at step {progress.current_step_index}"
        )
        return progress

    async def discard(self) -> bool:
        """Delete the stored checkpoint; generated document content is kept."""
        try:
            existed = await self._repository.delete(self.document_id)
        except Exception as e:
            logger.warning(f"Failed to delete progress for document {self.document_id}: {e}")
            raise PersistenceUnavailable(self.document_id, "delete", self.progress) from e
        self.progress = None
        logger.info(f"Discarded progress for document {self.document_id}")
        return existed

    # ------------------------------------------------------------------
    # Transitions
    async def complete_step(
        self, step_id: str, input_fields: Dict[str, str], generated_content: str
    ) -> GenerationProgress:
        progress = transitions.complete_step(
            self._require_progress("complete_step"),
            self.definition,
            step_id,
            input_fields,
            generated_content,
            self._now(),
        )
        if progress.is_complete:
            logger.info(
                f"All {progress.total_steps} steps complete for document {self.document_id}"
            )
        return await self._commit(progress, "complete_step")

    async def skip_step(self) -> GenerationProgress:
        progress = transitions.skip_step(
            self._require_progress("skip_step"), self.definition, self._now()
        )
        return await self._commit(progress, "skip_step")

    async def rewind(self) -> GenerationProgress:
        progress = transitions.rewind(self._require_progress("rewind"), self.definition)
        return await self._commit(progress, "rewind")

    async def regenerate_at(self, step_id: str) -> GenerationProgress:
        progress = transitions.regenerate_at(
            self._require_progress("regenerate_at"), self.definition, step_id
        )
        return await self._commit(progress, "regenerate_at")

    async def finish(self) -> GenerationProgress:
        progress = transitions.finish(self._require_progress("finish"), self._now())
        logger.info(f"Finished workflow {self.definition.kind} for document {self.document_id}")
        return await self._commit(progress, "finish")

    async def mark_modified(self, step_id: str, current_content: str) -> GenerationProgress:
        progress = transitions.mark_modified(
            self._require_progress("mark_modified"), step_id, current_content
        )
        return await self._commit(progress, "mark_modified")

    # ------------------------------------------------------------------
    # Generation input
    def generation_request(
        self, step_id: str, input_fields: Dict[str, str]
    ) -> context.GenerationRequest:
        """Build the request for generating ``step_id``, the current step.

        The context digest covers every earlier step, cut to the configured
        ``context.max_excerpt_chars``.
        """
        operation = "generation_request"
        progress = self._require_progress(operation)
        if progress.is_finished:
            raise StateViolation(operation, "workflow has been finished")
        current = self.definition.step_at(progress.current_step_index)
        if current is None or current.id != step_id:
            expected = current.id if current else None
            raise StateViolation(
                operation, f"step '{step_id}' is not the current step (expected '{expected}')"
            )
        return context.build_generation_request(
            progress,
            self.definition,
            step_id,
            input_fields,
            self.config.context.max_excerpt_chars,
        )
