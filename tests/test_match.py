from unittest.mock import MagicMock

import pytest

import match
import dao
from models import Role, SwipeType


STAFF_ID = 1
CLINIC_ID = 2


def _profiles(screener=True, questions=("Do you have a license?",)):
    staff = MagicMock(id=STAFF_ID, role=Role.STAFF, is_auto_screener_active=False, screening_questions=[])
    staff.name = "Dana"
    clinic = MagicMock(id=CLINIC_ID, role=Role.CLINIC, is_auto_screener_active=screener, screening_questions=list(questions))
    clinic.name = "Smile Clinic"
    return {STAFF_ID: staff, CLINIC_ID: clinic}


@pytest.fixture
def stub_dao(monkeypatch):
    profiles = _profiles()
    calls = {"swipes": [], "messages": [], "matches": []}

    monkeypatch.setattr(dao, "get_profile", lambda db_arg, pid: profiles.get(pid))
    monkeypatch.setattr(dao, "get_profiles", lambda db_arg, ids: [profiles[i] for i in ids if i in profiles])

    def fake_create_swipe(db_arg, s, t, swipe_type):
        calls["swipes"].append((s, t, swipe_type))
        return True

    def fake_create_message(db_arg, match_id, sender_id, content):
        calls["messages"].append((match_id, sender_id, content))
        return MagicMock(id=99)

    monkeypatch.setattr(dao, "create_swipe", fake_create_swipe)
    monkeypatch.setattr(dao, "create_message", fake_create_message)
    monkeypatch.setattr(dao, "find_swipe", lambda db_arg, s, t, swipe_type: None)
    return profiles, calls


def test_like_triggers_match_when_reverse_like_exists(monkeypatch, stub_dao):
    db = MagicMock()
    _, calls = stub_dao

    # find_swipe returns a value only when checking the reverse like (clinic -> staff)
    def fake_find_swipe(db_arg, s, t, swipe_type):
        if s == CLINIC_ID and t == STAFF_ID and swipe_type == SwipeType.LIKE:
            return MagicMock(id=11)
        return None

    def fake_create_match_if_absent(db_arg, u1, u2):
        calls["matches"].append((u1, u2))
        return MagicMock(id=20), True

    monkeypatch.setattr(dao, "find_swipe", fake_find_swipe)
    monkeypatch.setattr(dao, "create_match_if_absent", fake_create_match_if_absent)

    outcome = match.record_swipe(db, STAFF_ID, STAFF_ID, CLINIC_ID, SwipeType.LIKE)

    assert outcome == match.SwipeOutcome(is_match=True, match_id=20)
    assert calls["swipes"] == [(STAFF_ID, CLINIC_ID, SwipeType.LIKE)]
    assert calls["matches"] == [(STAFF_ID, CLINIC_ID)]
    assert len(calls["messages"]) == 1
    assert calls["messages"][0][:2] == (20, CLINIC_ID)


def test_like_without_reverse_like_is_not_a_match(monkeypatch, stub_dao):
    db = MagicMock()
    monkeypatch.setattr(dao, "create_match_if_absent", MagicMock(side_effect=AssertionError("no match expected")))

    outcome = match.record_swipe(db, STAFF_ID, STAFF_ID, CLINIC_ID, SwipeType.LIKE)

    assert outcome.is_match is False
    assert outcome.match_id is None


def test_pass_never_checks_reciprocity(monkeypatch, stub_dao):
    db = MagicMock()
    _, calls = stub_dao
    monkeypatch.setattr(dao, "find_swipe", MagicMock(return_value=MagicMock(id=1)))
    monkeypatch.setattr(dao, "create_match_if_absent", MagicMock(side_effect=AssertionError("no match expected")))

    outcome = match.record_swipe(db, STAFF_ID, STAFF_ID, CLINIC_ID, SwipeType.PASS)

    assert outcome.is_match is False
    assert calls["swipes"] == [(STAFF_ID, CLINIC_ID, SwipeType.PASS)]
    dao.find_swipe.assert_not_called()


def test_existing_match_is_returned_without_second_screener(monkeypatch, stub_dao):
    db = MagicMock()
    _, calls = stub_dao
    monkeypatch.setattr(dao, "find_swipe", lambda db_arg, s, t, swipe_type: MagicMock(id=1))
    monkeypatch.setattr(dao, "create_match_if_absent", lambda db_arg, u1, u2: (MagicMock(id=7), False))

    outcome = match.record_swipe(db, CLINIC_ID, CLINIC_ID, STAFF_ID, SwipeType.LIKE)

    assert outcome == match.SwipeOutcome(is_match=True, match_id=7)
    assert calls["messages"] == []


def test_caller_must_be_swiper(stub_dao):
    db = MagicMock()
    _, calls = stub_dao

    with pytest.raises(match.AuthorizationMismatch):
        match.record_swipe(db, CLINIC_ID, STAFF_ID, CLINIC_ID, SwipeType.LIKE)
    assert calls["swipes"] == []


def test_missing_target_profile_raises_not_found(stub_dao):
    db = MagicMock()
    _, calls = stub_dao

    with pytest.raises(match.ProfileNotFound):
        match.record_swipe(db, STAFF_ID, STAFF_ID, 404, SwipeType.LIKE)
    assert calls["swipes"] == []


def test_same_role_swipe_is_rejected(monkeypatch, stub_dao):
    db = MagicMock()
    profiles, calls = stub_dao
    other_staff = MagicMock(id=3, role=Role.STAFF)
    profiles[3] = other_staff

    with pytest.raises(match.InvalidOperation):
        match.record_swipe(db, STAFF_ID, STAFF_ID, 3, SwipeType.LIKE)
    assert calls["swipes"] == []


def test_self_swipe_is_rejected(stub_dao):
    with pytest.raises(match.InvalidOperation):
        match.record_swipe(MagicMock(), STAFF_ID, STAFF_ID, STAFF_ID, SwipeType.LIKE)


def test_role_opposite_is_total():
    assert Role.STAFF.opposite() is Role.CLINIC
    assert Role.CLINIC.opposite() is Role.STAFF


def test_build_screener_message_keeps_question_order():
    questions = ["First?", "Second?", "Third?"]
    body = match.build_screener_message(questions, "Smile Clinic")

    lines = body.split("\n")
    assert "Smile Clinic" in lines[0]
    assert lines[-3:] == ["• First?", "• Second?", "• Third?"]
    assert body == match.build_screener_message(questions, "Smile Clinic")


def test_auto_screener_skipped_when_disabled(monkeypatch, stub_dao):
    profiles, calls = stub_dao
    profiles[CLINIC_ID].is_auto_screener_active = False

    assert match.send_auto_screener(MagicMock(), 5, STAFF_ID, CLINIC_ID) is False
    assert calls["messages"] == []


def test_auto_screener_skipped_without_questions(monkeypatch, stub_dao):
    profiles, calls = stub_dao
    profiles[CLINIC_ID].screening_questions = []

    assert match.send_auto_screener(MagicMock(), 5, STAFF_ID, CLINIC_ID) is False
    assert calls["messages"] == []


def test_auto_screener_failure_is_swallowed(monkeypatch, stub_dao):
    db = MagicMock()

    def failing_create_message(db_arg, match_id, sender_id, content):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(dao, "create_message", failing_create_message)

    assert match.send_auto_screener(db, 5, STAFF_ID, CLINIC_ID) is False
    db.rollback.assert_called_once()


def test_post_message_requires_match_membership(monkeypatch):
    db = MagicMock()
    chat = MagicMock()
    chat.has_member.side_effect = lambda uid: uid in (STAFF_ID, CLINIC_ID)
    monkeypatch.setattr(dao, "get_match", lambda db_arg, mid: chat if mid == 1 else None)
    monkeypatch.setattr(dao, "create_message", lambda db_arg, mid, sid, content: MagicMock(id=3))

    with pytest.raises(match.MatchNotFound):
        match.post_message(db, 2, STAFF_ID, "hi")
    with pytest.raises(match.AuthorizationMismatch):
        match.post_message(db, 1, 42, "hi")
    assert match.post_message(db, 1, STAFF_ID, "hi").id == 3
