"""Schema-driven extraction of nested, attributed tag blocks.

Language-model output is only loosely structured, so the scanner is tolerant:
it never raises, ignores markup that is not part of the schema, and drops any
block that ends up with nothing inside it. Deciding whether an empty result is
a failure is left to the caller.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, Optional, Pattern, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

_FROZEN = ConfigDict(frozen=True)
_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_.:-]*$")


def _check_names(values: Tuple[str, ...]) -> Tuple[str, ...]:
    for value in values:
        if not _NAME.match(value):
            raise ValueError(f"invalid tag or attribute name: {value!r}")
    return values


class BlockLevel(BaseModel):
    """A structural level: ``<tag a1="..." a2="...">...</tag>``."""

    model_config = _FROZEN

    tag: str
    attributes: Tuple[str, ...] = ()

    @field_validator("tag")
    @classmethod
    def _ensure_tag(cls, v: str) -> str:
        return _check_names((v,))[0]

    @field_validator("attributes")
    @classmethod
    def _ensure_attributes(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return _check_names(v)


class LeafLevel(BaseModel):
    """The innermost block, holding ``<field>...</field>`` values."""

    model_config = _FROZEN

    tag: str
    fields: Tuple[str, ...]

    @field_validator("tag")
    @classmethod
    def _ensure_tag(cls, v: str) -> str:
        return _check_names((v,))[0]

    @field_validator("fields")
    @classmethod
    def _ensure_fields(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return _check_names(v)


class TagSchema(BaseModel):
    """Ordered nesting levels, outer to inner, followed by the leaf."""

    model_config = _FROZEN

    levels: Tuple[BlockLevel, ...]
    leaf: LeafLevel


class ParsedLeaf(BaseModel):
    model_config = _FROZEN

    tag: str
    fields: Dict[str, str]


class ParsedBlock(BaseModel):
    model_config = _FROZEN

    tag: str
    attributes: Dict[str, str]
    children: Tuple[Union["ParsedBlock", ParsedLeaf], ...]


ParsedBlock.model_rebuild()


class ParsedTree(BaseModel):
    model_config = _FROZEN

    blocks: Tuple[ParsedBlock, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def leaf_count(self) -> int:
        return sum(_count_leaves(block) for block in self.blocks)


def _count_leaves(block: ParsedBlock) -> int:
    total = 0
    for child in block.children:
        total += 1 if isinstance(child, ParsedLeaf) else _count_leaves(child)
    return total


# ----------------------------------------------------------------------
# Patterns


@lru_cache(maxsize=128)
def _block_pattern(tag: str, attributes: Tuple[str, ...]) -> Pattern[str]:
    attrs = "".join(rf'\s+{re.escape(name)}="([^"]*)"' for name in attributes)
    name = re.escape(tag)
    return re.compile(rf"<{name}{attrs}\s*>(.*?)</{name}\s*>", re.DOTALL)


@lru_cache(maxsize=128)
def _leaf_pattern(tag: str) -> Pattern[str]:
    name = re.escape(tag)
    return re.compile(rf"<{name}(?:\s[^>]*)?>(.*?)</{name}\s*>", re.DOTALL)


@lru_cache(maxsize=256)
def _field_pattern(field: str) -> Pattern[str]:
    name = re.escape(field)
    return re.compile(rf"<{name}\s*>(.*?)</{name}\s*>", re.DOTALL)


def extract_field(text: str, field: str) -> str:
    """Return the trimmed first ``<field>`` value in ``text``, or ``""``."""
    match = _field_pattern(field).search(text)
    return match.group(1).strip() if match else ""


# ----------------------------------------------------------------------
# Scanning


def _scan_leaves(text: str, leaf: LeafLevel) -> Tuple[ParsedLeaf, ...]:
    leaves = []
    for match in _leaf_pattern(leaf.tag).finditer(text):
        inner = match.group(1)
        values = {field: extract_field(inner, field) for field in leaf.fields}
        leaves.append(ParsedLeaf(tag=leaf.tag, fields=values))
    return tuple(leaves)


def _scan_level(text: str, schema: TagSchema, depth: int) -> Tuple[ParsedBlock, ...]:
    level = schema.levels[depth]
    blocks = []
    for match in _block_pattern(level.tag, level.attributes).finditer(text):
        attributes = dict(zip(level.attributes, match.groups()[:-1]))
        inner = match.group(len(level.attributes) + 1)
        if depth + 1 < len(schema.levels):
            children: Tuple[Union[ParsedBlock, ParsedLeaf], ...] = _scan_level(
                inner, schema, depth + 1
            )
        else:
            children = _scan_leaves(inner, schema.leaf)
        if not children:
            logger.debug(f"Dropping empty <{level.tag}> block {attributes}")
            continue
        blocks.append(
            ParsedBlock(tag=level.tag, attributes=attributes, children=children)
        )
    return tuple(blocks)


def parse_tagged_blocks(text: Optional[str], schema: TagSchema) -> ParsedTree:
    """Extract the schema's block tree from ``text``.

    Never raises; input without any matching outer block yields an empty tree.
    """
    if not isinstance(text, str) or not text:
        return ParsedTree()
    if not schema.levels:
        leaves = _scan_leaves(text, schema.leaf)
        if not leaves:
            return ParsedTree()
        return ParsedTree(
            blocks=(ParsedBlock(tag="", attributes={}, children=leaves),)
        )
    return ParsedTree(blocks=_scan_level(text, schema, 0))
