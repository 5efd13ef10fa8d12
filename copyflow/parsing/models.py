"""Typed three-level document produced from tagged model output."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

_FROZEN = ConfigDict(frozen=True)


class Item(BaseModel):
    """A single content piece, e.g. one email or one social post."""

    model_config = _FROZEN

    id: str
    title: str
    ordering_label: str = ""
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)
    body: str
    word_count: int
    char_count: int


class Group(BaseModel):
    """Items sharing a channel within a section."""

    model_config = _FROZEN

    id: str
    name: str
    items: Tuple[Item, ...]


class Section(BaseModel):
    """Top-level phase of a structured document."""

    model_config = _FROZEN

    id: str
    name: str
    ordering: str = ""
    groups: Tuple[Group, ...]


class StructuredDocument(BaseModel):
    model_config = _FROZEN

    sections: Tuple[Section, ...]
    warnings: Tuple[str, ...] = ()

    @property
    def total_items(self) -> int:
        return sum(len(group.items) for section in self.sections for group in section.groups)

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    def iter_items(self) -> Iterator[Tuple[Section, Group, Item]]:
        """Yield every item with its enclosing section and group, in order."""
        for section in self.sections:
            for group in section.groups:
                for item in group.items:
                    yield section, group, item


class ParseEmpty(BaseModel):
    """Returned instead of a document when no items could be extracted.

    Callers should treat this as a failed generation and retry or report it.
    """

    model_config = _FROZEN

    reason: str
    raw_length: int = 0
