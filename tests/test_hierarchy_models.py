import datetime as dt

import pytest

from yearbook.document import DocumentNode
from yearbook.exc import AlreadyExists, ValidationError
from yearbook.models import OWNER_MODELS, Chapter, DailyLog, Year
from yearbook.types import OwnerKind, OwnerRef, Section

from tests.conftest import OTHER_USER_ID, USER_ID, make_doc


def test_year_create(db_session):
    year = Year.create(db_session, USER_ID, 2023)
    assert year.id is not None
    assert Year.get_by_number(db_session, USER_ID, 2023) == year
    assert Year.get_by_number(db_session, OTHER_USER_ID, 2023) is None


def test_year_create_duplicate(db_session, year):
    with pytest.raises(AlreadyExists):
        Year.create(db_session, USER_ID, 2024)
    # Another user can have the same year
    assert Year.create(db_session, OTHER_USER_ID, 2024).id != year.id


@pytest.mark.parametrize("number", [1899, 2101])
def test_year_create_out_of_range(db_session, number):
    with pytest.raises(ValidationError):
        Year.create(db_session, USER_ID, number)


def test_year_list_for_user(db_session, year):
    Year.create(db_session, USER_ID, 2025)
    Year.create(db_session, OTHER_USER_ID, 2020)
    assert [y.year for y in Year.list_for_user(db_session, USER_ID)] == [2025, 2024]


@pytest.mark.parametrize(
    ("kind", "section", "title"),
    [
        (OwnerKind.DAILY_LOG, Section.DAILY_LOGS, "1/15/2024"),
        (OwnerKind.QUARTERLY_REFLECTION, Section.QUARTERLY_REFLECTIONS, "Q2 Reflection"),
        (OwnerKind.GOAL, Section.YEARLY_GOALS, "Get fit"),
        (OwnerKind.TASK, Section.YEARLY_GOALS, "Get fit > Run"),
        (OwnerKind.SUBTASK, Section.YEARLY_GOALS, "Get fit > Run > 5k"),
        (OwnerKind.CHAPTER, Section.BOOK_NOTES, "Fiction > Dune > Chapter 1"),
        (OwnerKind.LESSON, Section.LESSONS_LEARNED, "Patience"),
        (OwnerKind.CREATIVE_NOTE, Section.CREATIVE_DUMP, "Note from 3/5/2024"),
    ],
)
def test_content_source(owners, kind, section, title):
    owner = owners[kind]
    source = owner.content_source()
    assert source.year == 2024
    assert source.section == section
    assert source.item_id == owner.id
    assert source.item_title == title


def test_owner_ref(owners):
    for kind, owner in owners.items():
        assert owner.owner_ref == OwnerRef(kind, owner.id)
        assert OWNER_MODELS[kind] is type(owner)


def test_detached_owner_has_no_source():
    chapter = Chapter(title="Loose")
    assert chapter.owning_year is None
    assert chapter.content_source() is None


def test_document_property(db_session, owners):
    lesson = owners[OwnerKind.LESSON]
    assert lesson.document.to_dict() == {"type": "doc"}

    lesson.document = make_doc("be patient")
    lesson.save(db_session)
    db_session.expire_all()

    assert lesson.content == make_doc("be patient").to_dict()
    assert lesson.document.to_dict() == make_doc("be patient").to_dict()


def test_goal_documents_live_in_description(db_session, owners):
    task = owners[OwnerKind.TASK]
    task.document = DocumentNode.doc(DocumentNode.paragraph("steps"))
    task.save(db_session)
    assert task.description["content"][0]["content"][0]["text"] == "steps"


def test_deleting_year_deletes_items(db_session, year, owners):
    ids = {kind: owner.id for kind, owner in owners.items()}
    year.delete(db_session)
    for kind, owner_id in ids.items():
        assert db_session.get(OWNER_MODELS[kind], owner_id) is None


def test_daily_log_title_uses_date(db_session, year):
    log = DailyLog(year_id=year.id, date=dt.date(2024, 12, 3))
    log.save(db_session)
    assert log.item_title == "12/3/2024"
