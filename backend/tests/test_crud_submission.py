#!/usr/bin/env python3
"""
Submission storage tests

Verifies create/read/update/delete on the submissions table, the two
uniqueness rules and the typed errors raised by the storage layer.
"""
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from topic_portal.core.errors import (
    DuplicateMatricNumberError,
    DuplicateNameError,
    ErrorKind,
    SubmissionNotFoundError,
)
from topic_portal.crud import submission as crud_submission
from topic_portal.models.submission import TopicSubmission, start_of_day
from topic_portal.schemas.submission import Discipline, SubmissionCreate, SubmissionUpdate


def _create(db: Session, make_payload, **overrides) -> TopicSubmission:
    return crud_submission.create(db, obj_in=SubmissionCreate.model_validate(make_payload(**overrides)))


def _backdate(db: Session, obj: TopicSubmission, created_at: datetime) -> None:
    obj.created_at = created_at
    obj.updated_at = created_at
    db.commit()


def test_create_and_get(db: Session, make_payload):
    created = _create(db, make_payload, matricNumber=" 2021/abc ")

    assert len(created.id) == 32
    assert created.matric_number == "2021/ABC"
    assert created.created_at is not None
    assert created.updated_at is not None

    retrieved = crud_submission.get(db, created.id)
    assert retrieved is not None
    assert retrieved.full_name == "Ada Lovelace"
    assert retrieved.discipline == "linguistics"

    assert crud_submission.get(db, "missing-id") is None
    assert crud_submission.get(db, None) is None


def test_duplicate_name_is_case_insensitive(db: Session, make_payload):
    _create(db, make_payload, fullName="Ada Lovelace", matricNumber="2021/001")

    with pytest.raises(DuplicateNameError) as exc_info:
        _create(db, make_payload, fullName="ADA LOVELACE", matricNumber="2021/002")

    assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME
    assert exc_info.value.status_code == 409
    assert len(crud_submission.list_submissions(db)) == 1


def test_duplicate_matric_number_is_rejected_by_unique_index(db: Session, make_payload):
    _create(db, make_payload, fullName="Ada Lovelace", matricNumber="2021/abc")

    with pytest.raises(DuplicateMatricNumberError) as exc_info:
        _create(db, make_payload, fullName="Grace Hopper", matricNumber="2021/ABC")

    assert exc_info.value.message == "This matric number has already been used"
    # The session is usable again after the failed insert
    assert len(crud_submission.list_submissions(db)) == 1


def test_list_orders_newest_first_and_filters(db: Session, make_payload):
    older = _create(db, make_payload, fullName="Ada Lovelace", matricNumber="A/1")
    newer = _create(db, make_payload, fullName="Grace Hopper", matricNumber="A/2", discipline="communication")
    newest = _create(db, make_payload, fullName="Alan Turing", matricNumber="A/3")
    _backdate(db, older, datetime(2024, 1, 1))
    _backdate(db, newer, datetime(2024, 2, 1))
    _backdate(db, newest, datetime(2024, 3, 1))

    everything = crud_submission.list_submissions(db)
    assert [s.id for s in everything] == [newest.id, newer.id, older.id]

    linguistics = crud_submission.list_submissions(db, discipline=Discipline.LINGUISTICS)
    assert [s.id for s in linguistics] == [newest.id, older.id]

    communication = crud_submission.list_submissions(db, discipline=Discipline.COMMUNICATION)
    assert [s.id for s in communication] == [newer.id]


def test_list_search_matches_name_matric_and_topic(db: Session, make_payload):
    _create(db, make_payload, fullName="Ada Lovelace", matricNumber="LIN/1",
            projectTopic="Tone sandhi in Yoruba verbs")
    _create(db, make_payload, fullName="Grace Hopper", matricNumber="COM/2",
            projectTopic="Radio drama audiences in Lagos")

    assert [s.full_name for s in crud_submission.list_submissions(db, search="lovelace")] == ["Ada Lovelace"]
    assert [s.full_name for s in crud_submission.list_submissions(db, search="com/")] == ["Grace Hopper"]
    assert [s.full_name for s in crud_submission.list_submissions(db, search="YORUBA")] == ["Ada Lovelace"]
    assert crud_submission.list_submissions(db, search="100%") == []
    assert len(crud_submission.list_submissions(db, search="   ")) == 2


def test_update_overwrites_fields_and_refreshes_updated_at(db: Session, make_payload):
    created = _create(db, make_payload)
    _backdate(db, created, datetime(2024, 1, 1))

    update = SubmissionUpdate.model_validate(make_payload(
        fullName="Ada King",
        matricNumber="2021/999",
        discipline="communication",
        projectTopic="Political rhetoric on campus radio",
    ))
    updated = crud_submission.update_submission(db, obj_id=created.id, obj_in=update)

    assert updated.id == created.id
    assert updated.full_name == "Ada King"
    assert updated.matric_number == "2021/999"
    assert updated.discipline == "communication"
    assert updated.created_at == datetime(2024, 1, 1)
    assert updated.updated_at > datetime(2024, 1, 1)


def test_update_does_not_recheck_full_name(db: Session, make_payload):
    _create(db, make_payload, fullName="Ada Lovelace", matricNumber="A/1")
    other = _create(db, make_payload, fullName="Grace Hopper", matricNumber="A/2")

    update = SubmissionUpdate.model_validate(make_payload(fullName="ada lovelace", matricNumber="A/2"))
    updated = crud_submission.update_submission(db, obj_id=other.id, obj_in=update)

    assert updated.full_name == "ada lovelace"


def test_update_with_taken_matric_number_leaves_record_unchanged(db: Session, make_payload):
    _create(db, make_payload, fullName="Ada Lovelace", matricNumber="A/1")
    other = _create(db, make_payload, fullName="Grace Hopper", matricNumber="A/2")

    update = SubmissionUpdate.model_validate(make_payload(fullName="Grace Hopper", matricNumber="a/1"))
    with pytest.raises(DuplicateMatricNumberError) as exc_info:
        crud_submission.update_submission(db, obj_id=other.id, obj_in=update)

    assert exc_info.value.message == "A submission with this matric number already exists"
    db.expire_all()
    assert crud_submission.get(db, other.id).matric_number == "A/2"


def test_update_missing_submission(db: Session, make_payload):
    update = SubmissionUpdate.model_validate(make_payload())
    with pytest.raises(SubmissionNotFoundError):
        crud_submission.update_submission(db, obj_id="does-not-exist", obj_in=update)


def test_remove_submission(db: Session, make_payload):
    created = _create(db, make_payload)

    removed = crud_submission.remove_submission(db, obj_id=created.id)
    assert removed.id == created.id
    assert removed.matric_number == "2021/001"
    assert crud_submission.get(db, created.id) is None

    # Deleting again is a defined not-found result
    with pytest.raises(SubmissionNotFoundError) as exc_info:
        crud_submission.remove_submission(db, obj_id=created.id)
    assert exc_info.value.status_code == 404


def test_integrity_error_on_matric_number_is_translated():
    exc = IntegrityError(
        "INSERT", {}, Exception("UNIQUE constraint failed: topic_submissions.matric_number")
    )
    assert isinstance(crud_submission.translate_integrity_error(exc), DuplicateMatricNumberError)


def test_other_integrity_errors_propagate(db: Session, make_payload):
    created = _create(db, make_payload)

    with pytest.raises(IntegrityError):
        crud_submission.update(db, db_obj=created, obj_in={"full_name": None})

    db.expire_all()
    assert crud_submission.get(db, created.id).full_name == "Ada Lovelace"


def test_get_stats_counts_all_and_today(db: Session, make_payload):
    old = _create(db, make_payload, fullName="Ada Lovelace", matricNumber="A/1")
    _create(db, make_payload, fullName="Grace Hopper", matricNumber="A/2", discipline="communication")
    _create(db, make_payload, fullName="Alan Turing", matricNumber="A/3")
    _backdate(db, old, datetime(2024, 1, 1))

    stats = crud_submission.get_stats(db, today_start=datetime(2025, 1, 1))

    assert stats == {"total": 3, "linguistics": 2, "communication": 1, "today": 2}


def test_get_stats_on_empty_table(db: Session):
    assert crud_submission.get_stats(db, today_start=datetime(2025, 1, 1)) == {
        "total": 0, "linguistics": 0, "communication": 0, "today": 0,
    }


@pytest.mark.parametrize(
    "timezone, now, expected",
    [
        ("UTC", datetime(2026, 10, 19, 14, 30), datetime(2026, 10, 19)),
        # 23:30 UTC is already the next day in Lagos (UTC+1)
        ("Africa/Lagos", datetime(2026, 10, 19, 23, 30), datetime(2026, 10, 19, 23, 0)),
        ("Africa/Lagos", datetime(2026, 10, 19, 10, 0), datetime(2026, 10, 18, 23, 0)),
    ],
)
def test_start_of_day(timezone, now, expected):
    assert start_of_day(timezone, now) == expected
