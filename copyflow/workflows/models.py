"""Pydantic models describing multi-step workflow definitions."""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class FieldCondition(BaseModel):
    """Makes a field visible only when another field holds a given value."""

    field_id: str
    value: Union[str, List[str]]

    def is_met(self, input_fields: dict[str, str]) -> bool:
        current = input_fields.get(self.field_id, "")
        if isinstance(self.value, list):
            return current in self.value
        return current == self.value


class StepField(BaseModel):
    """A single input collected for a workflow step."""

    id: str
    label: str
    type: Literal["text", "textarea", "select", "number"] = "text"
    required: bool = False
    max_length: Optional[int] = None
    options: List[str] = Field(default_factory=list)
    conditional_on: Optional[FieldCondition] = None

    def is_visible(self, input_fields: dict[str, str]) -> bool:
        return self.conditional_on is None or self.conditional_on.is_met(input_fields)


class WorkflowStep(BaseModel):
    """One unit of a multi-step generation sequence."""

    id: str
    name: str
    description: Optional[str] = None
    fields: List[StepField] = Field(default_factory=list)


class WorkflowDefinition(BaseModel):
    """Canonical ordered step list for a workflow kind."""

    kind: str
    name: str
    steps: List[WorkflowStep]
    section_separator: str = "\n\n"

    @field_validator("steps")
    @classmethod
    def _ensure_unique_steps(cls, v: List[WorkflowStep]) -> List[WorkflowStep]:
        if not v:
            raise ValueError("a workflow needs at least one step")
        ids = [step.id for step in v]
        if len(set(ids)) != len(ids):
            raise ValueError("step ids must be unique")
        return v

    @property
    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps]

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def index_of(self, step_id: str) -> int:
        """Position of ``step_id`` in canonical order, or -1 when unknown."""
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return -1

    def step_at(self, index: int) -> Optional[WorkflowStep]:
        if 0 <= index < len(self.steps):
            return self.steps[index]
        return None

    def get_step(self, step_id: str) -> Optional[WorkflowStep]:
        return self.step_at(self.index_of(step_id))


def validate_inputs(step: WorkflowStep, input_fields: dict[str, str]) -> List[str]:
    """Return problems with ``input_fields`` for ``step``; empty when valid.

    Hidden conditional fields are not checked.
    """

    problems: List[str] = []
    for field in step.fields:
        if not field.is_visible(input_fields):
            continue
        value = (input_fields.get(field.id) or "").strip()
        if not value:
            if field.required:
                problems.append(f"{field.label} is required")
            continue
        if field.max_length is not None and len(value) > field.max_length:
            problems.append(
                f"{field.label} exceeds {field.max_length} characters"
            )
        if field.type == "select" and field.options and value not in field.options:
            problems.append(f"{field.label} must be one of: {', '.join(field.options)}")
    return problems
