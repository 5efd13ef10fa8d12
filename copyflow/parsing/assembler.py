"""Assembly of single-shot multi-part output into a StructuredDocument."""

from __future__ import annotations

import html
import logging
import re
from typing import List, Optional, Union

from .models import Group, Item, ParseEmpty, Section, StructuredDocument
from .schemas import GENERIC_SCHEMA, DocumentSchema
from .tagged import ParsedBlock, ParsedLeaf, parse_tagged_blocks

logger = logging.getLogger(__name__)

_MARKUP = re.compile(r"<[^>]*>")
_PARAGRAPH_BREAK = re.compile(r"\n\n+")


def strip_markup(text: str) -> str:
    return _MARKUP.sub("", text)


def count_words(text: str) -> int:
    """Count whitespace-separated words in the visible text of ``text``."""
    return len(strip_markup(text).split())


def count_chars(text: str) -> int:
    return len(strip_markup(text))


def _build_item(
    leaf: ParsedLeaf,
    schema: DocumentSchema,
    section_id: str,
    group_id: str,
    index: int,
) -> Item:
    body = leaf.fields.get(schema.body_field, "")
    return Item(
        id=f"{section_id}_{group_id}_{index}",
        title=leaf.fields.get(schema.title_field) or f"{schema.item_label} {index + 1}",
        ordering_label=leaf.fields.get(schema.ordering_label_field, ""),
        fields={
            key: leaf.fields.get(tag) or None
            for key, tag in schema.optional_fields.items()
        },
        body=body,
        word_count=count_words(body),
        char_count=count_chars(body),
    )


def _build_group(block: ParsedBlock, schema: DocumentSchema, section_id: str) -> Group:
    group_id = block.attributes.get(schema.group_id_attr, "")
    items = tuple(
        _build_item(leaf, schema, section_id, group_id, index)
        for index, leaf in enumerate(
            child for child in block.children if isinstance(child, ParsedLeaf)
        )
    )
    return Group(
        id=group_id,
        name=block.attributes.get(schema.group_name_attr, ""),
        items=items,
    )


def _build_section(block: ParsedBlock, schema: DocumentSchema) -> Section:
    section_id = block.attributes.get(schema.section_id_attr, "")
    groups = tuple(
        _build_group(child, schema, section_id)
        for child in block.children
        if isinstance(child, ParsedBlock)
    )
    return Section(
        id=section_id,
        name=block.attributes.get(schema.section_name_attr, ""),
        ordering=block.attributes.get(schema.section_ordering_attr, ""),
        groups=tuple(group for group in groups if group.items),
    )


def assemble(
    raw_text: Optional[str],
    schema: DocumentSchema = GENERIC_SCHEMA,
    expected_items: Optional[int] = None,
) -> Union[StructuredDocument, ParseEmpty]:
    """Parse ``raw_text`` into a :class:`StructuredDocument`.

    Returns :class:`ParseEmpty` when no item survives parsing. A count that
    differs from ``expected_items`` is accepted and reported in
    ``StructuredDocument.warnings``.
    """

    tree = parse_tagged_blocks(raw_text, schema.to_tag_schema())
    sections = tuple(
        section
        for section in (_build_section(block, schema) for block in tree.blocks)
        if section.groups
    )
    raw_length = len(raw_text) if isinstance(raw_text, str) else 0
    if not sections:
        logger.warning(
            f"No {schema.name} items could be parsed from {raw_length} characters of output"
        )
        return ParseEmpty(
            reason=f"No {schema.item_label.lower()}s could be parsed from the output",
            raw_length=raw_length,
        )

    document = StructuredDocument(sections=sections)
    if expected_items is not None and document.total_items != expected_items:
        message = (
            f"Expected {expected_items} {schema.item_label.lower()}s, "
            f"parsed {document.total_items}"
        )
        logger.warning(message)
        document = StructuredDocument(sections=sections, warnings=(message,))
    else:
        logger.debug(
            f"Parsed {document.total_items} items across {len(sections)} sections"
        )
    return document


def _body_html(body: str) -> str:
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(body)]
    return "".join(
        f"<p>{p.replace(chr(10), '<br>')}</p>" for p in paragraphs if p
    )


def to_editor_html(
    document: StructuredDocument,
    heading: Optional[str] = None,
    subheading: Optional[str] = None,
) -> str:
    """Render ``document`` as editor-ready HTML.

    Item bodies are already markup and are inserted as-is; names, titles and
    optional field values are escaped.
    """

    parts: List[str] = []
    if heading:
        parts.append(f"<h1>{html.escape(heading)}</h1>")
    if subheading:
        parts.append(f"<p>{html.escape(subheading)}</p>")
    if heading or subheading:
        parts.append("<hr>")

    for section in document.sections:
        title = html.escape(section.name)
        if section.ordering:
            title += f" ({html.escape(section.ordering)})"
        parts.append(f"<h2>{title}</h2>")
        for group in section.groups:
            parts.append(f"<h3>{html.escape(group.name)}</h3>")
            for item in group.items:
                item_title = html.escape(item.title)
                if item.ordering_label:
                    item_title += f" &mdash; {html.escape(item.ordering_label)}"
                parts.append(f"<h4>{item_title}</h4>")
                for key, value in item.fields.items():
                    if value:
                        label = key.replace("_", " ").capitalize()
                        parts.append(
                            f"<p><strong>{html.escape(label)}:</strong> {html.escape(value)}</p>"
                        )
                parts.append(_body_html(item.body))
                parts.append("<hr>")
    return "".join(parts)
