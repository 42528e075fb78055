"""Tests for the live editor document and mark transactions."""

import pytest

from yearbook.document import DocumentNode, EditorDocument, HighlightMark, Mark

from tests.conftest import make_doc


def highlight_ids(document, start, end):
    return [
        mark.id
        for mark in document.marks_between(start, end)
        if isinstance(mark, HighlightMark)
    ]


class TestDispatch:
    def test_add_mark_splits_runs(self):
        document = EditorDocument(make_doc("hello world"))
        mark = HighlightMark(id="h1", tags=("a",))

        assert document.dispatch(document.transaction().add_mark(0, 5, mark))

        runs = document.root.content[0].content
        assert [run.text for run in runs] == ["hello", " world"]
        assert runs[0].marks == [mark]
        assert runs[1].marks == []
        assert document.version == 1

    def test_remove_mark_restores_structure(self):
        original = make_doc("hello world")
        document = EditorDocument(original.clone())
        mark = HighlightMark(id="h1", tags=("a",))

        document.dispatch(document.transaction().add_mark(2, 8, mark))
        document.dispatch(document.transaction().remove_mark(2, 8, mark))

        assert document.to_dict() == original.to_dict()

    def test_remove_mark_keeps_marks_of_runs_split_on_load(self):
        document = EditorDocument(
            DocumentNode.doc(DocumentNode.paragraph("hel", "lo", " world"))
        )
        before = document.marks_by_offset()
        mark = HighlightMark(id="h1")

        document.dispatch(document.transaction().add_mark(0, 5, mark))
        document.dispatch(document.transaction().remove_mark(0, 5, mark))

        assert document.marks_by_offset() == before
        assert document.text == "hello world "

    def test_remove_keeps_other_marks(self):
        original = DocumentNode.doc(
            DocumentNode.paragraph(
                DocumentNode(type="text", text="hello", marks=[Mark(type="bold")]),
                " world",
            )
        )
        document = EditorDocument(original.clone())
        mark = HighlightMark(id="h1", tags=("a",))

        document.dispatch(document.transaction().add_mark(0, 11, mark))
        runs = document.root.content[0].content
        assert runs[0].marks == [Mark(type="bold"), mark]
        assert runs[1].marks == [mark]

        document.dispatch(document.transaction().remove_mark(0, 11, mark))
        assert document.to_dict() == original.to_dict()

    def test_empty_transaction_is_a_no_op(self):
        document = EditorDocument(make_doc("hello"))
        calls = []
        document.add_listener(calls.append)

        assert document.dispatch(document.transaction()) is False
        assert document.version == 0
        assert calls == []

    def test_one_notification_per_transaction(self):
        document = EditorDocument(make_doc("hello world"))
        calls = []
        document.add_listener(calls.append)

        transaction = (
            document.transaction()
            .add_mark(0, 5, HighlightMark(id="h1"))
            .add_mark(6, 11, HighlightMark(id="h2"))
        )
        document.dispatch(transaction)

        assert calls == [document]
        assert document.version == 1

    def test_failed_transaction_changes_nothing(self):
        original = make_doc("hello")
        document = EditorDocument(original.clone())
        transaction = (
            document.transaction()
            .add_mark(0, 2, HighlightMark(id="h1"))
            .add_mark(3, 50, HighlightMark(id="h2"))
        )

        with pytest.raises(ValueError):
            document.dispatch(transaction)

        assert document.to_dict() == original.to_dict()
        assert document.version == 0

    @pytest.mark.parametrize(("start", "end"), [(-1, 2), (3, 3), (4, 1)])
    def test_invalid_ranges(self, start, end):
        document = EditorDocument(make_doc("hello"))
        with pytest.raises(ValueError):
            document.dispatch(
                document.transaction().add_mark(start, end, HighlightMark(id="h1"))
            )

    def test_replace_bumps_version(self):
        document = EditorDocument(make_doc("hello"))
        document.replace(make_doc("HELLO"))
        assert document.version == 1
        assert document.text == "HELLO "


class TestHighlightMarks:
    def test_same_id_is_not_added_twice(self):
        document = EditorDocument(make_doc("hello world"))
        mark = HighlightMark(id="h1", tags=("a",))

        document.dispatch(document.transaction().add_mark(0, 5, mark))
        document.dispatch(document.transaction().add_mark(0, 5, mark))

        assert highlight_ids(document, 0, 5) == ["h1"]

    def test_different_ids_overlap(self):
        document = EditorDocument(make_doc("hello world"))
        document.dispatch(
            document.transaction()
            .add_mark(0, 5, HighlightMark(id="h1"))
            .add_mark(3, 8, HighlightMark(id="h2"))
        )

        assert highlight_ids(document, 3, 5) == ["h1", "h2"]
        assert highlight_ids(document, 0, 3) == ["h1"]
        assert highlight_ids(document, 5, 8) == ["h2"]

    def test_mark_across_paragraphs(self):
        document = EditorDocument(make_doc("hello", "world"))
        assert document.text_between(3, 9) == "lo wor"

        document.dispatch(document.transaction().add_mark(3, 9, HighlightMark(id="h1")))

        first, second = document.root.content
        assert [run.text for run in first.content] == ["hel", "lo"]
        assert [run.text for run in second.content] == ["wor", "ld"]
        assert document.has_highlight("h1", 6, 9)
        assert not document.has_highlight("h1", 0, 3)

    def test_has_highlight_whole_document(self):
        document = EditorDocument(make_doc("hello"))
        assert not document.has_highlight("h1")
        document.dispatch(document.transaction().add_mark(1, 2, HighlightMark(id="h1")))
        assert document.has_highlight("h1")

    def test_marks_by_offset(self):
        document = EditorDocument(make_doc("abc"))
        mark = HighlightMark(id="h1")
        document.dispatch(document.transaction().add_mark(1, 2, mark))

        marks = document.marks_by_offset()
        assert marks[0] == ()
        assert marks[1] == (mark,)
        assert marks[2] == ()

    def test_mark_survives_serialization(self):
        document = EditorDocument(make_doc("hello"))
        document.dispatch(
            document.transaction().add_mark(0, 5, HighlightMark(id="h1", tags=("x",)))
        )

        reloaded = EditorDocument(DocumentNode.from_dict(document.to_dict()))
        assert reloaded.has_highlight("h1", 0, 5)
        assert reloaded.marks_between(0, 5) == [HighlightMark(id="h1", tags=("x",))]
