"""Error types raised by the copyflow pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .sequencer.models import GenerationProgress


class CopyflowError(Exception):
    """Base class for copyflow errors."""


class StateViolation(CopyflowError):
    """A sequencer operation was invoked in a state that does not allow it.

    Raised before any mutation takes place; the caller should ``load`` again
    to obtain the authoritative state before retrying.
    """

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class PersistenceUnavailable(CopyflowError):
    """The progress repository could not read or write a checkpoint.

    ``progress`` holds the in-memory state at the time of the failure. It is
    still usable for the rest of the session but will not survive a reload.
    """

    def __init__(
        self,
        document_id: str,
        operation: str,
        progress: Optional["GenerationProgress"] = None,
    ) -> None:
        self.document_id = document_id
        self.operation = operation
        self.progress = progress
        super().__init__(
            f"Could not {operation} progress for document {document_id}; "
            "continuing in this session only"
        )


class IncompatibleWorkflow(CopyflowError):
    """Stored progress belongs to a different workflow kind."""

    def __init__(self, document_id: str, expected: str, found: str) -> None:
        self.document_id = document_id
        self.expected = expected
        self.found = found
        super().__init__(
            f"Document {document_id} holds progress for '{found}', expected '{expected}'"
        )
