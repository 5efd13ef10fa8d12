"""Data models for persisted generation progress."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class SequencerState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    FINISHED = "finished"


class WorkflowOptions(BaseModel):
    """Workflow-wide choices that stay fixed across all steps."""

    apply_brand_voice: bool = False
    persona_id: Optional[str] = None
    extra: Dict[str, str] = Field(default_factory=dict)


class StepRecord(BaseModel):
    """Content produced for one step and the inputs that produced it."""

    step_id: str
    input_fields: Dict[str, str] = Field(default_factory=dict)
    generated_content: str
    completed_at: datetime
    was_modified: bool = False
    content_hash: str


class GenerationProgress(BaseModel):
    """Checkpoint of an in-flight multi-step workflow for one document."""

    workflow_kind: str
    document_id: str
    total_steps: int = Field(ge=1)
    current_step_index: int = 0
    completed_step_ids: List[str] = Field(default_factory=list)
    step_records: Dict[str, StepRecord] = Field(default_factory=dict)
    is_complete: bool = False
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    options: WorkflowOptions = Field(default_factory=WorkflowOptions)

    @model_validator(mode="after")
    def _check_invariants(self) -> "GenerationProgress":
        if not 0 <= self.current_step_index <= self.total_steps:
            raise ValueError(
                f"current_step_index {self.current_step_index} outside [0, {self.total_steps}]"
            )
        if self.is_complete != (self.current_step_index == self.total_steps):
            raise ValueError("is_complete must hold exactly when every step is passed")
        if self.is_complete != (self.completed_at is not None):
            raise ValueError("completed_at must be set exactly when complete")
        if self.finished_at is not None and not self.is_complete:
            raise ValueError("only a complete workflow can be finished")
        if len(set(self.completed_step_ids)) != len(self.completed_step_ids):
            raise ValueError("completed_step_ids contains duplicates")
        for key, record in self.step_records.items():
            if key != record.step_id:
                raise ValueError(f"step record key {key} does not match {record.step_id}")
        return self

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    @property
    def state(self) -> SequencerState:
        if self.is_finished:
            return SequencerState.FINISHED
        if self.is_complete:
            return SequencerState.COMPLETE
        return SequencerState.IN_PROGRESS

    def to_json(self) -> str:
        """Serialize progress to JSON."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "GenerationProgress":
        """Deserialize progress from JSON."""
        return cls.model_validate_json(data)


class ProgressSummary(BaseModel):
    """Condensed view of a checkpoint, suitable for a resume prompt."""

    state: SequencerState
    completed: int
    total: int
    percent: int
    current_step_id: Optional[str] = None
    current_step_name: Optional[str] = None
    skipped_step_ids: List[str] = Field(default_factory=list)
    modified_step_ids: List[str] = Field(default_factory=list)
