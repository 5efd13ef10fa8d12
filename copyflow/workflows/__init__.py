"""Workflow definitions and the in-process workflow registry."""

from __future__ import annotations

from typing import Dict

from .brochure import BROCHURE_WORKFLOW
from .models import (
    FieldCondition,
    StepField,
    WorkflowDefinition,
    WorkflowStep,
    validate_inputs,
)

# Workflow kinds known to this process. Built-in definitions are registered at
# import time; applications add their own with ``register_workflow``.
WORKFLOWS: Dict[str, WorkflowDefinition] = {}


def register_workflow(definition: WorkflowDefinition, replace: bool = False) -> None:
    """Add ``definition`` to ``WORKFLOWS`` under its kind.

    Re-registering an existing kind requires ``replace=True``.
    """

    if definition.kind in WORKFLOWS and not replace:
        raise ValueError(f"Workflow kind already registered: {definition.kind}")
    WORKFLOWS[definition.kind] = definition


def get_workflow(kind: str) -> WorkflowDefinition:
    """Return the registered definition for ``kind``; raises ``KeyError``."""
    try:
        return WORKFLOWS[kind]
    except KeyError:
        raise KeyError(f"Unknown workflow kind: {kind}") from None


register_workflow(BROCHURE_WORKFLOW)


__all__ = [
    "BROCHURE_WORKFLOW",
    "FieldCondition",
    "StepField",
    "WorkflowDefinition",
    "WorkflowStep",
    "WORKFLOWS",
    "get_workflow",
    "register_workflow",
    "validate_inputs",
]
