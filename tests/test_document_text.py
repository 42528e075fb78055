"""Tests for text extraction and previews."""

import pytest

from yearbook.document import (
    DocumentNode,
    HighlightMark,
    Mark,
    content_size,
    extract_text,
    has_substantial_content,
    preview_text,
    text_between,
    validate_content_processing,
)
from yearbook.document.text import iter_text_runs

from tests.conftest import make_doc


class TestExtractText:
    def test_none_is_empty(self):
        assert extract_text(None) == ""

    def test_paragraphs_are_separated(self):
        assert extract_text(make_doc("hello", "world")) == "hello world "

    def test_runs_in_one_paragraph_are_joined(self):
        doc = DocumentNode.doc(DocumentNode.paragraph("hel", "lo"))
        assert extract_text(doc) == "hello "

    def test_hard_break_separates_words(self):
        doc = DocumentNode.doc(
            DocumentNode.paragraph(
                "a", DocumentNode(type="hardBreak"), DocumentNode(type="text", text="b")
            )
        )
        assert extract_text(doc) == "a b "

    def test_nested_list(self):
        doc = DocumentNode.from_dict(
            {
                "type": "doc",
                "content": [
                    {
                        "type": "bulletList",
                        "content": [
                            {
                                "type": "listItem",
                                "content": [
                                    {
                                        "type": "paragraph",
                                        "content": [{"type": "text", "text": "x"}],
                                    }
                                ],
                            }
                        ],
                    }
                ],
            }
        )
        # paragraph, list item and list each add a separator
        assert extract_text(doc) == "x   "

    def test_unknown_node_types_contribute_text(self):
        doc = DocumentNode.from_dict(
            {
                "type": "doc",
                "content": [
                    {
                        "type": "callout",
                        "content": [{"type": "text", "text": "note"}],
                    }
                ],
            }
        )
        assert extract_text(doc) == "note"


class TestHasSubstantialContent:
    def test_none(self):
        assert has_substantial_content(None) is False

    def test_empty_document(self):
        assert has_substantial_content(DocumentNode.empty()) is False

    def test_whitespace_only(self):
        assert has_substantial_content(make_doc("   ", "")) is False

    def test_text(self):
        assert has_substantial_content(make_doc("hi")) is True


class TestPreviewText:
    def test_none(self):
        assert preview_text(None) == ""

    def test_short_text_is_returned_trimmed(self):
        assert preview_text(make_doc("  hello world  ")) == "hello world"

    def test_exact_length_is_not_truncated(self):
        text = "a" * 200
        assert preview_text(make_doc(text)) == text

    def test_truncates_at_word_boundary(self):
        text = ("word " * 50).strip()
        preview = preview_text(make_doc(text))
        assert preview == text[:199] + "..."
        assert not preview[:-3].endswith(" ")

    def test_hard_truncates_without_late_space(self):
        text = "a" * 250
        assert preview_text(make_doc(text)) == "a" * 200 + "..."

    def test_ignores_early_space(self):
        text = "x" * 100 + " " + "y" * 150
        assert preview_text(make_doc(text)) == text[:200] + "..."

    def test_custom_length(self):
        assert preview_text(make_doc("hello wonderful world"), max_length=10) == (
            "hello wond..."
        )


def test_validate_content_processing():
    stats = validate_content_processing(make_doc("hello", "world"))
    assert stats.has_content is True
    assert stats.preview == "hello world"
    assert stats.text_length == len("hello world")

    empty = validate_content_processing(None)
    assert empty.has_content is False
    assert empty.preview == ""
    assert empty.text_length == 0


class TestAddressing:
    def test_content_size_matches_text(self):
        doc = make_doc("hello world")
        assert content_size(doc) == len("hello world ")

    def test_text_between(self):
        doc = make_doc("hello", "world")
        assert text_between(doc, 0, 5) == "hello"
        assert text_between(doc, 3, 9) == "lo wor"

    @pytest.mark.parametrize(("start", "end"), [(-1, 3), (4, 2), (0, 100)])
    def test_text_between_rejects_bad_ranges(self, start, end):
        with pytest.raises(ValueError):
            text_between(make_doc("hello"), start, end)

    def test_text_runs_follow_flattened_offsets(self):
        doc = DocumentNode.doc(
            DocumentNode.paragraph("ab", "cd"), DocumentNode.paragraph("ef")
        )
        runs = [(run.start, run.end, run.node.text) for run in iter_text_runs(doc)]
        assert runs == [(0, 2, "ab"), (2, 4, "cd"), (5, 7, "ef")]


class TestSerialization:
    def test_round_trip_keeps_marks_attrs_and_unknown_nodes(self):
        data = {
            "type": "doc",
            "content": [
                {
                    "type": "heading",
                    "attrs": {"level": 2},
                    "content": [
                        {
                            "type": "text",
                            "text": "Title",
                            "marks": [
                                {"type": "bold"},
                                {
                                    "type": "highlightWithTags",
                                    "attrs": {"id": "h1", "tags": ["a", "b"]},
                                },
                            ],
                        }
                    ],
                },
                {"type": "mathBlock", "attrs": {"latex": "x^2"}},
            ],
        }
        node = DocumentNode.from_dict(data)
        assert node.to_dict() == data

        marks = node.content[0].content[0].marks
        assert marks[0] == Mark(type="bold")
        assert marks[1] == HighlightMark(id="h1", tags=("a", "b"))

    def test_missing_document_is_empty(self):
        assert DocumentNode.from_dict(None).to_dict() == {"type": "doc"}
