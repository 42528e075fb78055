"""Tests for the Tag model and TagService."""

import pytest

from yearbook.exc import AlreadyExists, DoesNotExist, ValidationError
from yearbook.models import Highlight, Tag
from yearbook.services import HighlightService, TagService
from yearbook.types import OwnerKind, TagSummary

from tests.conftest import OTHER_USER_ID, USER_ID


class TestValidateTagName:
    def test_trims(self):
        assert TagService.validate_tag_name("  work life  ") == "work life"

    @pytest.mark.parametrize("name", ["ok", "with-hyphen", "under_score", "A1 b2"])
    def test_valid(self, name):
        assert TagService.validate_tag_name(name) == name

    @pytest.mark.parametrize("name", ["", "   ", None, "a" * 51, "no!", "semi;colon"])
    def test_invalid(self, name):
        with pytest.raises(ValidationError):
            TagService.validate_tag_name(name)

    def test_max_length(self):
        assert TagService.validate_tag_name("a" * 50) == "a" * 50


class TestGetOrCreateTags:
    def test_creates_missing_in_input_order(self, db_session):
        tags = TagService.get_or_create_tags(db_session, USER_ID, ["b", "a"])
        assert [tag.name for tag in tags] == ["b", "a"]
        assert all(tag.id is not None for tag in tags)

    def test_reuses_existing(self, db_session):
        existing = TagService.create_tag(db_session, USER_ID, "work")
        tags = TagService.get_or_create_tags(db_session, USER_ID, ["work", "new"])
        assert tags[0].id == existing.id
        assert len(Tag.list_for_user(db_session, USER_ID)) == 2

    def test_collapses_duplicates(self, db_session):
        tags = TagService.get_or_create_tags(db_session, USER_ID, ["x", " x ", "y"])
        assert [tag.name for tag in tags] == ["x", "y"]

    def test_names_are_case_sensitive(self, db_session):
        tags = TagService.get_or_create_tags(db_session, USER_ID, ["Work", "work"])
        assert len({tag.id for tag in tags}) == 2

    def test_empty_list(self, db_session):
        with pytest.raises(ValidationError):
            TagService.get_or_create_tags(db_session, USER_ID, [])

    def test_invalid_name_creates_nothing(self, db_session):
        with pytest.raises(ValidationError):
            TagService.get_or_create_tags(db_session, USER_ID, ["fine", "not fine!"])
        assert Tag.list_for_user(db_session, USER_ID) == []

    def test_tags_are_per_user(self, db_session):
        mine = TagService.get_or_create_tags(db_session, USER_ID, ["shared"])
        theirs = TagService.get_or_create_tags(db_session, OTHER_USER_ID, ["shared"])
        assert mine[0].id != theirs[0].id


def test_create_tag_duplicate(db_session):
    TagService.create_tag(db_session, USER_ID, "work")
    with pytest.raises(AlreadyExists):
        TagService.create_tag(db_session, USER_ID, " work ")


def test_list_tags_counts_highlights(db_session, daily_log):
    a, b, c = TagService.get_or_create_tags(db_session, USER_ID, ["a", "b", "c"])
    HighlightService.create_annotation(
        db_session, OwnerKind.DAILY_LOG, daily_log.id, "hello", 0, 5, "h1", [a.id, b.id]
    )
    HighlightService.create_annotation(
        db_session, OwnerKind.DAILY_LOG, daily_log.id, "world", 6, 11, "h2", [a.id]
    )

    assert TagService.list_tags(db_session, USER_ID) == [
        TagSummary(id=a.id, name="a", highlight_count=2),
        TagSummary(id=b.id, name="b", highlight_count=1),
        TagSummary(id=c.id, name="c", highlight_count=0),
    ]


def test_suggest_tags(db_session):
    TagService.get_or_create_tags(db_session, USER_ID, ["Work", "workout", "home"])
    TagService.get_or_create_tags(db_session, OTHER_USER_ID, ["worry"])

    assert TagService.suggest_tags(db_session, USER_ID, "wo") == ["Work", "workout"]
    assert TagService.suggest_tags(db_session, USER_ID, "  ") == []
    assert TagService.suggest_tags(db_session, USER_ID, "wo", limit=1) == ["Work"]


def test_suggest_tags_escapes_wildcards(db_session):
    TagService.get_or_create_tags(db_session, USER_ID, ["a_b", "axb"])
    assert TagService.suggest_tags(db_session, USER_ID, "a_") == ["a_b"]


def test_delete_tag_keeps_highlights(db_session, daily_log):
    (tag,) = TagService.get_or_create_tags(db_session, USER_ID, ["gone"])
    highlight = HighlightService.create_annotation(
        db_session, OwnerKind.DAILY_LOG, daily_log.id, "hello", 0, 5, "h1", [tag.id]
    )

    tag_id = tag.id
    TagService.delete_tag(db_session, USER_ID, tag_id)
    db_session.expire_all()

    assert Tag.get(db_session, tag_id) is None
    remaining = Highlight.get(db_session, highlight.id)
    assert remaining is not None
    assert remaining.tags == []


def test_delete_other_users_tag(db_session):
    (tag,) = TagService.get_or_create_tags(db_session, OTHER_USER_ID, ["theirs"])
    with pytest.raises(DoesNotExist):
        TagService.delete_tag(db_session, USER_ID, tag.id)
