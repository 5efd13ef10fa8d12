"""Content fingerprints used to detect edits to generated copy."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .sequencer.models import StepRecord

FINGERPRINT_LENGTH = 16


def content_hash(text: str) -> str:
    """Return a deterministic fingerprint of ``text``.

    Only used for change detection, never for integrity checks.
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def is_modified(record: "StepRecord", current_content: str) -> bool:
    """Return ``True`` when ``current_content`` differs from what was generated."""
    return content_hash(current_content) != record.content_hash
