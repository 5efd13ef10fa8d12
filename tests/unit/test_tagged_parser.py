"""Tagged block parser tests."""

import pytest

from copyflow.parsing import (
    BlockLevel,
    LeafLevel,
    ParsedBlock,
    ParsedLeaf,
    TagSchema,
    parse_tagged_blocks,
)

SCHEMA = TagSchema(
    levels=(
        BlockLevel(tag="section", attributes=("id", "name")),
        BlockLevel(tag="group", attributes=("id",)),
    ),
    leaf=LeafLevel(tag="item", fields=("title", "body")),
)

RAW = (
    'Here is your content:\n'
    '<section id="intro" name="Intro > Overview">\n'
    '  <group id="email">\n'
    '    <note>ignore me</note>\n'
    '    <item><title> Hello </title><body><p>First <em>body</em></p></body></item>\n'
    '    <item><title>Second</title></item>\n'
    '  </group>\n'
    '</section>\n'
    '<section id="close" name="Close">\n'
    '  <group id="social"><item><body>Closing words</body></item></group>\n'
    '</section>\n'
)


def test_parses_nested_blocks_with_attributes():
    tree = parse_tagged_blocks(RAW, SCHEMA)

    assert len(tree.blocks) == 2
    intro = tree.blocks[0]
    assert intro.tag == "section"
    assert intro.attributes == {"id": "intro", "name": "Intro > Overview"}
    group = intro.children[0]
    assert isinstance(group, ParsedBlock)
    assert group.attributes == {"id": "email"}
    first, second = group.children
    assert isinstance(first, ParsedLeaf)
    assert first.fields == {"title": "Hello", "body": "<p>First <em>body</em></p>"}
    assert second.fields == {"title": "Second", "body": ""}
    assert tree.leaf_count == 3


def test_parsing_is_idempotent():
    assert parse_tagged_blocks(RAW, SCHEMA) == parse_tagged_blocks(RAW, SCHEMA)


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        "No tags at all, just prose.",
        "<section id=\"a\" name=\"b\">never closed",
        "<group id=\"g\"><item><title>orphan</title></item></group>",
        12345,
    ],
)
def test_no_matching_outer_tags_yields_empty_tree(text):
    tree = parse_tagged_blocks(text, SCHEMA)
    assert tree.is_empty
    assert tree.leaf_count == 0


def test_empty_group_drops_its_section():
    raw = (
        '<section id="empty" name="Empty"><group id="g"></group></section>'
        '<section id="full" name="Full"><group id="g"><item><title>x</title></item></group></section>'
    )
    tree = parse_tagged_blocks(raw, SCHEMA)

    assert [block.attributes["id"] for block in tree.blocks] == ["full"]


def test_section_with_only_empty_group_disappears_entirely():
    raw = '<section id="s" name="S"><group id="g"><p>no items here</p></group></section>'
    assert parse_tagged_blocks(raw, SCHEMA).is_empty


def test_whitespace_only_fields_are_empty_and_blank_items_kept():
    raw = (
        '<section id="s" name="S"><group id="g">'
        "<item><title>   </title><body>\n\t</body></item>"
        "<item><title>Kept</title><body>  </body></item>"
        "</group></section>"
    )
    tree = parse_tagged_blocks(raw, SCHEMA)

    leaves = tree.blocks[0].children[0].children
    assert len(leaves) == 2
    assert leaves[0].fields == {"title": "", "body": ""}
    assert leaves[1].fields == {"title": "Kept", "body": ""}


def test_attributes_must_follow_declared_order():
    raw = '<section name="S" id="s"><group id="g"><item><title>x</title></item></group></section>'
    assert parse_tagged_blocks(raw, SCHEMA).is_empty


def test_leaf_tag_tolerates_unexpected_attributes():
    raw = '<section id="s" name="S"><group id="g"><item kind="email"><title>x</title></item></group></section>'
    tree = parse_tagged_blocks(raw, SCHEMA)
    assert tree.leaf_count == 1


def test_schema_rejects_invalid_tag_names():
    with pytest.raises(ValueError):
        BlockLevel(tag="bad tag")
