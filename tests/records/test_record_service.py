from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta

import pytest

from attendance_ledger.core.enums import Role
from attendance_ledger.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from attendance_ledger.database.memory import InMemoryStore
from attendance_ledger.records.memory_record_repository import InMemoryRecordRepository
from attendance_ledger.records.service import RecordService

DAY = date(2026, 2, 2)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


def make_service():
    store = InMemoryStore()
    return RecordService(InMemoryRecordRepository(store)), store


class RacingRecords(InMemoryRecordRepository):
    """Simulates another request checking the session out first."""

    def update_checkout(self, *, record_id, check_out, notes=None):
        return False


def test_check_in_then_check_out_fills_the_session():
    svc, _ = make_service()

    rec = svc.check_in(1, now=at(8))
    assert (rec.work_date, rec.check_in, rec.check_out) == (DAY, "08:00", None)

    done = svc.check_out(1, rec.record_id, now=at(17))
    assert (done.check_in, done.check_out) == ("08:00", "17:00")
    assert svc.get_record(rec.record_id).check_out == "17:00"


def test_second_check_in_while_active_is_conflict_and_creates_nothing():
    svc, _ = make_service()
    svc.check_in(1, now=at(8))

    with pytest.raises(ConflictError):
        svc.check_in(1, now=at(9))

    assert len(svc.get_user_records(1)) == 1


def test_check_in_allowed_again_after_check_out():
    svc, _ = make_service()
    first = svc.check_in(1, now=at(8))
    svc.check_out(1, first.record_id, now=at(12))

    second = svc.check_in(1, now=at(13))

    assert [r.record_id for r in svc.get_today_records(1, DAY)] == [second.record_id, first.record_id]
    assert svc.get_active_record(1, DAY).record_id == second.record_id


def test_check_out_before_check_in_is_invalid_range_and_leaves_record():
    svc, _ = make_service()
    rec = svc.check_in(1, now=at(8))

    with pytest.raises(InvalidRangeError):
        svc.check_out(1, rec.record_id, now=at(7))

    assert svc.get_record(rec.record_id).check_out is None


def test_check_out_in_the_same_minute_is_invalid_range():
    svc, _ = make_service()
    rec = svc.check_in(1, now=at(8, 0))

    with pytest.raises(InvalidRangeError):
        svc.check_out(1, rec.record_id, now=at(8, 0))


def test_second_check_out_is_conflict_and_keeps_first_result():
    svc, _ = make_service()
    rec = svc.check_in(1, now=at(8))
    first = svc.check_out(1, rec.record_id, now=at(17))

    with pytest.raises(ConflictError):
        svc.check_out(1, rec.record_id, now=at(18))

    assert svc.get_record(rec.record_id) == first


def test_check_out_unknown_record_is_not_found():
    svc, _ = make_service()
    with pytest.raises(NotFoundError):
        svc.check_out(1, 404, now=at(17))


def test_check_out_of_someone_elses_session_requires_admin():
    svc, _ = make_service()
    rec = svc.check_in(1, now=at(8))

    with pytest.raises(AuthorizationError):
        svc.check_out(2, rec.record_id, now=at(17))

    done = svc.check_out(2, rec.record_id, now=at(17), current_role=Role.ADMIN)
    assert done.check_out == "17:00"


def test_check_out_notes_override_only_when_given():
    svc, _ = make_service()
    a = svc.check_in(1, "started remote", now=at(8))
    assert svc.check_out(1, a.record_id, now=at(12)).notes == "started remote"

    b = svc.check_in(1, "afternoon", now=at(13))
    assert svc.check_out(1, b.record_id, "left early", now=at(16)).notes == "left early"


def test_lost_check_out_race_is_conflict():
    store = InMemoryStore()
    seed = RecordService(InMemoryRecordRepository(store)).check_in(1, now=at(8))
    svc = RecordService(RacingRecords(store))

    with pytest.raises(ConflictError):
        svc.check_out(1, seed.record_id, now=at(17))


def test_reads_are_sorted_by_date_then_check_in_descending():
    svc, _ = make_service()
    for day, user in ((date(2026, 2, 1), 1), (date(2026, 2, 3), 2), (date(2026, 2, 2), 1)):
        rec = svc.check_in(user, now=at(8, day=day))
        svc.check_out(user, rec.record_id, now=at(12, day=day))
    svc.check_in(1, now=at(13, day=date(2026, 2, 2)))

    everything = svc.get_all_records()
    assert [(r.work_date.day, r.check_in) for r in everything] == [(3, "08:00"), (2, "13:00"), (2, "08:00"), (1, "08:00")]

    mine = svc.get_user_records(1)
    assert {r.user_id for r in mine} == {1}
    assert len(mine) == 3

    window = svc.get_user_records_between(1, date(2026, 2, 2), date(2026, 2, 3))
    assert [r.check_in for r in window] == ["13:00", "08:00"]

    assert len(svc.get_all_records_between(date(2026, 2, 3), date(2026, 2, 3))) == 1


def test_range_reads_reject_inverted_range():
    svc, _ = make_service()
    with pytest.raises(ValidationError):
        svc.get_all_records_between(date(2026, 2, 3), date(2026, 2, 1))
    with pytest.raises(ValidationError):
        svc.get_user_records_between(1, date(2026, 2, 3), date(2026, 2, 1))


def test_active_record_only_for_today():
    svc, _ = make_service()
    svc.check_in(1, now=at(22, day=date(2026, 2, 1)))

    assert svc.get_active_record(1, DAY) is None
    assert svc.has_active_check_in(1, date(2026, 2, 1)) is True
    assert svc.has_active_check_in(1, DAY) is False


@pytest.mark.parametrize("seed", range(5))
def test_random_interleaving_keeps_at_most_one_active_session(seed):
    rng = random.Random(seed)
    svc, store = make_service()
    users = (1, 2, 3)
    clock = at(6)

    for _ in range(150):
        clock += timedelta(minutes=1)
        user = rng.choice(users)

        if rng.random() < 0.5:
            already_active = svc.get_active_record(user, DAY)
            if already_active:
                with pytest.raises(ConflictError):
                    svc.check_in(user, now=clock)
            else:
                svc.check_in(user, now=clock)
        else:
            mine = svc.get_user_records(user)
            if not mine:
                continue
            target = rng.choice(mine)
            if target.check_out is not None:
                with pytest.raises(ConflictError):
                    svc.check_out(user, target.record_id, now=clock)
            else:
                svc.check_out(user, target.record_id, now=clock)

        for u in users:
            open_sessions = [
                r for r in store.time_records.values() if r.user_id == u and r.work_date == DAY and r.check_out is None
            ]
            assert len(open_sessions) <= 1
