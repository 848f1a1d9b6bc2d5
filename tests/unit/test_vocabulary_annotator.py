"""
Unit tests for core/vocabulary/annotator.py — block and document annotation.
"""

import copy

import pytest

from core.vocabulary.annotator import (
    BlockAnnotator,
    VocabularyAnnotator,
    annotate_document,
    count_annotations,
)
from core.vocabulary.keys import KeyGenerator
from core.vocabulary.matcher import TermSegmenter
from core.vocabulary.schemas import (
    Block,
    OpaqueBlock,
    OpaqueChild,
    VocabularyItem,
    dump_document,
    parse_document,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def vocabulary():
    return [
        VocabularyItem(id="v-auto", type="vocabularyItem", word="autotroph"),
        VocabularyItem(id="v-hetero", type="glossary.vocabularyItem", word="heterotroph"),
    ]


def make_block(*children, mark_defs=None, key="b1"):
    return parse_document([{
        "_type": "block",
        "_key": key,
        "style": "normal",
        "markDefs": mark_defs or [],
        "children": list(children),
    }])[0]


def span(text, marks=None, key="s1"):
    return {"_type": "span", "_key": key, "text": text, "marks": marks or []}


def annotate_block(block, items):
    annotator = BlockAnnotator(TermSegmenter(items), KeyGenerator())
    return annotator.annotate(block)


# ---------------------------------------------------------------------------
# BlockAnnotator
# ---------------------------------------------------------------------------

class TestBlockAnnotator:
    def test_single_match(self):
        block = make_block(span("autotroph"))
        items = [VocabularyItem(id="v1", type="vocabularyItem", word="autotroph")]
        result = annotate_block(block, items)

        assert len(result.children) == 1
        child = result.children[0]
        assert child.text == "autotroph"
        assert len(child.marks) == 1

        assert len(result.mark_defs) == 1
        definition = result.mark_defs[0]
        assert definition.key == child.marks[0]
        assert definition.type == "vocabularyItem"
        assert definition.item.ref == "v1"
        assert definition.item.type == "reference"

    def test_new_span_gets_fresh_key(self):
        block = make_block(span("autotroph", key="orig"))
        result = annotate_block(block, [VocabularyItem(id="v1", type="vocabularyItem", word="autotroph")])
        child = result.children[0]
        assert child.key != "orig"
        assert child.key != child.marks[0]

    def test_split_sentence(self, vocabulary):
        block = make_block(span("I love autotrophs and heterotrophs"))
        result = annotate_block(block, vocabulary)

        assert [c.text for c in result.children] == ["I love ", "autotrophs", " and ", "heterotrophs"]
        assert result.children[0].marks == []
        assert result.children[2].marks == []

        by_key = {d.key: d for d in result.mark_defs}
        assert by_key[result.children[1].marks[0]].item.ref == "v-auto"
        assert by_key[result.children[3].marks[0]].item.ref == "v-hetero"

    def test_namespace_stripped_from_type(self, vocabulary):
        result = annotate_block(make_block(span("heterotroph")), vocabulary)
        assert result.mark_defs[0].type == "vocabularyItem"

    def test_decorators_preserved(self, vocabulary):
        block = make_block(span("an autotroph", marks=["em1"]))
        result = annotate_block(block, vocabulary)

        assert result.children[0].text == "an "
        assert result.children[0].marks == ["em1"]
        assert result.children[1].text == "autotroph"
        assert result.children[1].marks == ["em1", result.mark_defs[0].key]

    def test_no_match_keeps_child(self, vocabulary):
        block = make_block(span("nothing matches here", marks=["strong"]))
        result = annotate_block(block, vocabulary)
        assert result.children[0] is block.children[0]
        assert result.mark_defs == []

    def test_already_annotated_span_skipped(self, vocabulary):
        block = make_block(
            span("autotroph", marks=["lnk1"]),
            mark_defs=[{"_type": "link", "_key": "lnk1", "href": "https://example.com"}],
        )
        result = annotate_block(block, vocabulary)
        assert result.children[0] is block.children[0]
        assert [d.key for d in result.mark_defs] == ["lnk1"]

    def test_decorator_only_span_processed(self, vocabulary):
        block = make_block(span("autotroph", marks=["strong"]))
        result = annotate_block(block, vocabulary)
        assert len(result.mark_defs) == 1
        assert result.children[0].marks[0] == "strong"

    def test_empty_text_skipped(self, vocabulary):
        block = make_block(span(""))
        result = annotate_block(block, vocabulary)
        assert result.children[0] is block.children[0]

    def test_opaque_child_passes_through(self, vocabulary):
        block = make_block(
            {"_type": "inlineImage", "_key": "img", "alt": "autotroph"},
            span("autotroph", key="s2"),
        )
        result = annotate_block(block, vocabulary)
        assert isinstance(result.children[0], OpaqueChild)
        assert result.children[0] is block.children[0]
        assert result.children[1].text == "autotroph"

    def test_malformed_span_passes_through(self, vocabulary):
        block = make_block({"_type": "span", "_key": "bad", "marks": []})
        result = annotate_block(block, vocabulary)
        assert dump_document([result]) == dump_document([block])

    def test_no_children_returns_block(self, vocabulary):
        block = Block(key="empty", style="normal")
        assert annotate_block(block, vocabulary) is block

    def test_definition_order(self, vocabulary):
        block = make_block(
            span("heterotroph then ", key="s1"),
            span("autotroph", key="s2"),
            mark_defs=[{"_type": "link", "_key": "lnk1", "href": "https://example.com"}],
        )
        result = annotate_block(block, vocabulary)

        assert result.mark_defs[0].key == "lnk1"
        assert [d.item.ref for d in result.mark_defs[1:]] == ["v-hetero", "v-auto"]

    def test_child_order_preserved(self, vocabulary):
        block = make_block(
            span("first autotroph", key="s1"),
            {"_type": "break", "_key": "br"},
            span("then heterotroph", key="s2"),
        )
        result = annotate_block(block, vocabulary)
        assert [getattr(c, "text", None) for c in result.children] == [
            "first ", "autotroph", None, "then ", "heterotroph",
        ]

    def test_marks_resolve(self, vocabulary):
        block = make_block(
            span("autotroph and heterotroph", marks=["em"]),
            mark_defs=[{"_type": "link", "_key": "lnk1", "href": "x"}],
        )
        result = annotate_block(block, vocabulary)
        defined = {d.key for d in result.mark_defs}
        for child in result.children:
            for mark in child.marks:
                assert mark == "em" or mark in defined

    def test_text_preserved(self, vocabulary):
        text = "Autotrophs feed heterotrophs; autotroph!"
        result = annotate_block(make_block(span(text)), vocabulary)
        assert "".join(c.text for c in result.children) == text

    def test_block_fields_kept(self, vocabulary):
        block = parse_document([{
            "_type": "block", "_key": "b1", "style": "h2", "listItem": "bullet", "level": 2,
            "markDefs": [], "children": [span("autotroph")],
        }])[0]
        data = dump_document([annotate_block(block, vocabulary)])[0]
        assert data["style"] == "h2"
        assert data["listItem"] == "bullet"
        assert data["level"] == 2


# ---------------------------------------------------------------------------
# Document annotation
# ---------------------------------------------------------------------------

class TestAnnotateDocument:
    @pytest.fixture
    def raw_document(self):
        return [
            {
                "_type": "block", "_key": "b1", "style": "normal",
                "markDefs": [{"_type": "link", "_key": "lnk1", "href": "https://example.com"}],
                "children": [
                    span("I love autotrophs", key="s1"),
                    span("autotroph", marks=["lnk1"], key="s2"),
                ],
            },
            {"_type": "image", "_key": "img", "asset": {"_ref": "image-1"}},
            {
                "_type": "block", "_key": "b2", "style": "normal", "markDefs": [],
                "children": [span("and heterotrophs too", marks=["em"], key="s3")],
            },
            {"_type": "block", "_key": "b3", "style": "normal", "markDefs": [], "children": []},
        ]

    def test_blocks_in_order(self, raw_document, vocabulary):
        result = annotate_document(parse_document(raw_document), vocabulary)
        assert [b.key for b in result] == ["b1", "img", "b2", "b3"]

    def test_counts(self, raw_document, vocabulary):
        blocks = parse_document(raw_document)
        result = annotate_document(blocks, vocabulary)
        assert count_annotations(blocks, result) == 2

    def test_empty_vocabulary_is_identity(self, raw_document):
        blocks = parse_document(raw_document)
        result = annotate_document(blocks, [])
        assert dump_document(result) == raw_document
        assert result is not blocks

    def test_idempotent(self, raw_document, vocabulary):
        first = annotate_document(parse_document(raw_document), vocabulary)
        second = annotate_document(first, vocabulary)
        assert dump_document(second) == dump_document(first)

    def test_input_not_mutated(self, raw_document, vocabulary):
        snapshot = copy.deepcopy(raw_document)
        blocks = parse_document(raw_document)
        annotate_document(blocks, vocabulary)
        assert dump_document(blocks) == snapshot
        assert raw_document == snapshot

    def test_vocabulary_not_reordered(self, raw_document, vocabulary):
        items = list(reversed(vocabulary))
        before = [i.id for i in items]
        annotate_document(parse_document(raw_document), items)
        assert [i.id for i in items] == before

    def test_keys_unique_across_document(self, raw_document, vocabulary):
        result = annotate_document(parse_document(raw_document), vocabulary)
        keys = []
        for block in result:
            keys.append(block.key)
            keys.extend(d.key for d in block.mark_defs)
            keys.extend(c.key for c in block.children)
        assert len(keys) == len(set(keys))

    def test_definition_keys_unique_per_block(self, vocabulary):
        text = " ".join(["autotroph"] * 50)
        result = annotate_document([make_block(span(text))], vocabulary)
        keys = [d.key for d in result[0].mark_defs]
        assert len(keys) == 50
        assert len(set(keys)) == 50

    def test_key_length(self, vocabulary):
        result = annotate_document([make_block(span("autotroph"))], vocabulary, key_length=16)
        assert len(result[0].mark_defs[0].key) == 16
        assert len(result[0].children[0].key) == 16

    def test_word_start(self):
        items = [VocabularyItem(id="v1", type="vocabularyItem", word="cat")]
        block = make_block(span("concatenate"))

        loose = annotate_document([block], items)
        strict = annotate_document([block], items, word_start=True)

        assert [c.text for c in loose[0].children] == ["con", "catenate"]
        assert strict[0].children[0] is block.children[0]


# ---------------------------------------------------------------------------
# Malformed blocks
# ---------------------------------------------------------------------------

class TestMalformedBlocks:
    @pytest.fixture
    def good_block(self):
        return {
            "_type": "block", "_key": "ok", "markDefs": [],
            "children": [span("heterotroph", key="s5")],
        }

    def test_null_mark_defs_annotated(self, vocabulary, good_block):
        raw = {"_type": "block", "_key": "b1", "markDefs": None, "children": [span("an autotroph")]}
        result = annotate_document(parse_document([raw, good_block]), vocabulary)

        assert [c.text for c in result[0].children] == ["an ", "autotroph"]
        assert [d.item.ref for d in result[0].mark_defs] == ["v-auto"]
        assert result[1].mark_defs[0].item.ref == "v-hetero"

    def test_null_children_passes_through(self, vocabulary, good_block):
        raw = {"_type": "block", "_key": "b1", "markDefs": [], "children": None}
        blocks = parse_document([raw, good_block])
        result = annotate_document(blocks, vocabulary)

        assert result[0] is blocks[0]
        assert dump_document(result)[0] == raw
        assert result[1].mark_defs[0].item.ref == "v-hetero"

    def test_definition_without_key_passes_through(self, vocabulary, good_block):
        raw = {
            "_type": "block", "_key": "b1",
            "markDefs": [{"_type": "link", "href": "x"}],
            "children": [span("autotroph")],
        }
        blocks = parse_document([raw, good_block])
        result = annotate_document(blocks, vocabulary)

        assert isinstance(result[0], OpaqueBlock)
        assert dump_document(result)[0] == raw
        assert count_annotations(blocks, result) == 1

    def test_block_annotator_returns_opaque_block(self, vocabulary):
        block = parse_document([{"_type": "block", "children": "autotroph"}])[0]
        assert annotate_block(block, vocabulary) is block


class TestVocabularyAnnotator:
    def test_uses_supplied_key_generator(self, vocabulary):
        generator = KeyGenerator(reserved={"taken"})
        result = VocabularyAnnotator().annotate([make_block(span("autotroph"))], vocabulary, generator)
        assert result[0].mark_defs[0].key in generator
        assert result[0].children[0].key in generator

    def test_returns_new_list(self, vocabulary):
        blocks = [make_block(span("nothing"))]
        result = VocabularyAnnotator().annotate(blocks, vocabulary)
        assert result is not blocks
        assert dump_document(result) == dump_document(blocks)
