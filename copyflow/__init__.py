"""copyflow: resumable multi-step copy generation pipeline."""

from .context import (
    GenerationRequest,
    build_context_digest,
    build_document_content,
    build_generation_request,
)
from .errors import (
    CopyflowError,
    IncompatibleWorkflow,
    PersistenceUnavailable,
    StateViolation,
)
from .hashing import content_hash, is_modified
from .parsing import ParseEmpty, StructuredDocument, assemble, parse_tagged_blocks
from .persistence import get_repository
from .sequencer import GenerationProgress, SectionSequencer, StepRecord, WorkflowOptions
from .workflows import WORKFLOWS, get_workflow, register_workflow

__version__ = "0.1.0"
__all__ = [
    "CopyflowError",
    "GenerationProgress",
    "GenerationRequest",
    "IncompatibleWorkflow",
    "ParseEmpty",
    "PersistenceUnavailable",
    "SectionSequencer",
    "StateViolation",
    "StepRecord",
    "StructuredDocument",
    "WORKFLOWS",
    "WorkflowOptions",
    "assemble",
    "build_context_digest",
    "build_document_content",
    "build_generation_request",
    "content_hash",
    "get_repository",
    "get_workflow",
    "is_modified",
    "parse_tagged_blocks",
    "register_workflow",
]
