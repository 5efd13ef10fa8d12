"""Document schemas mapping section/group/item onto concrete tag names."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from .tagged import BlockLevel, LeafLevel, TagSchema


class DocumentSchema(BaseModel):
    """Tag vocabulary for a three-level structured output."""

    model_config = ConfigDict(frozen=True)

    name: str
    section_tag: str
    section_id_attr: str = "id"
    section_name_attr: str = "name"
    section_ordering_attr: str = "ordering"
    group_tag: str
    group_id_attr: str = "id"
    group_name_attr: str = "name"
    item_tag: str
    title_field: str = "title"
    ordering_label_field: str = "ordering-label"
    body_field: str = "body"
    # output key -> tag name; resolved to None when absent
    optional_fields: Dict[str, str] = Field(default_factory=dict)
    item_label: str = "Item"

    def to_tag_schema(self) -> TagSchema:
        return TagSchema(
            levels=(
                BlockLevel(
                    tag=self.section_tag,
                    attributes=(
                        self.section_id_attr,
                        self.section_name_attr,
                        self.section_ordering_attr,
                    ),
                ),
                BlockLevel(
                    tag=self.group_tag,
                    attributes=(self.group_id_attr, self.group_name_attr),
                ),
            ),
            leaf=LeafLevel(
                tag=self.item_tag,
                fields=(
                    self.title_field,
                    self.ordering_label_field,
                    self.body_field,
                    *self.optional_fields.values(),
                ),
            ),
        )


GENERIC_SCHEMA = DocumentSchema(
    name="generic",
    section_tag="section",
    group_tag="group",
    item_tag="item",
)

CAMPAIGN_SCHEMA = DocumentSchema(
    name="campaign",
    section_tag="campaign-phase",
    section_ordering_attr="timing",
    group_tag="campaign-channel",
    item_tag="campaign-piece",
    title_field="piece-title",
    ordering_label_field="piece-timing",
    body_field="piece-body",
    optional_fields={
        "subject": "piece-subject",
        "preview": "piece-preview",
        "platform": "piece-platform",
        "cta": "piece-cta",
    },
    item_label="Piece",
)

SCHEMAS: Dict[str, DocumentSchema] = {
    GENERIC_SCHEMA.name: GENERIC_SCHEMA,
    CAMPAIGN_SCHEMA.name: CAMPAIGN_SCHEMA,
}
