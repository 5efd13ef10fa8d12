"""Section sequencing: progress models, transitions and the persisting driver."""

from .engine import SectionSequencer
from .models import (
    GenerationProgress,
    ProgressSummary,
    SequencerState,
    StepRecord,
    WorkflowOptions,
)

__all__ = [
    "GenerationProgress",
    "ProgressSummary",
    "SectionSequencer",
    "SequencerState",
    "StepRecord",
    "WorkflowOptions",
]
