"""Parsing of tagged language-model output into typed documents."""

from .assembler import assemble, count_chars, count_words, to_editor_html
from .models import Group, Item, ParseEmpty, Section, StructuredDocument
from .schemas import CAMPAIGN_SCHEMA, GENERIC_SCHEMA, SCHEMAS, DocumentSchema
from .tagged import (
    BlockLevel,
    LeafLevel,
    ParsedBlock,
    ParsedLeaf,
    ParsedTree,
    TagSchema,
    parse_tagged_blocks,
)

__all__ = [
    "BlockLevel",
    "CAMPAIGN_SCHEMA",
    "DocumentSchema",
    "GENERIC_SCHEMA",
    "Group",
    "Item",
    "LeafLevel",
    "ParseEmpty",
    "ParsedBlock",
    "ParsedLeaf",
    "ParsedTree",
    "SCHEMAS",
    "Section",
    "StructuredDocument",
    "TagSchema",
    "assemble",
    "count_chars",
    "count_words",
    "parse_tagged_blocks",
    "to_editor_html",
]
