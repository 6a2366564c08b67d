"""Storage gateway: local fallback, remote routing and day planning."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
import requests

from personalsystems.gateway.connectivity import ConnectivityState
from personalsystems.gateway.gateway import StorageGateway
from personalsystems.gateway.local import ENTRIES_KEY, HABITS_KEY, LocalStore
from personalsystems.gateway.planner import DayPlanner
from personalsystems.gateway.records import EntryRecord, HabitRecord, NoteRecord
from personalsystems.gateway.remote import GatewayError, RemoteStore

pytestmark = pytest.mark.unit

MONDAY = date(2024, 3, 4)


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload or {}
    return resp


@pytest.fixture
def local(tmp_path):
    return LocalStore(tmp_path / "store.json")


@pytest.fixture
def offline(local):
    remote = RemoteStore("http://api.test", session=MagicMock())
    return StorageGateway(remote, local, ConnectivityState(lambda: False))


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def online(local, session):
    remote = RemoteStore("http://api.test/", token="tok", session=session)
    return StorageGateway(remote, local, ConnectivityState(lambda: True))


class TestConnectivityState:
    def test_probe_is_cached_until_refresh(self):
        answers = iter([False, True])
        probe = MagicMock(side_effect=lambda: next(answers))
        state = ConnectivityState(probe)

        assert state.check() is False
        assert state.check() is False
        assert probe.call_count == 1
        assert state.refresh() is True
        assert probe.call_count == 2

    def test_probe_error_means_offline(self):
        state = ConnectivityState(MagicMock(side_effect=OSError("no route")))
        assert state.check() is False

    def test_remote_probe_uses_short_timeout(self, session):
        session.get.return_value = _response(200)
        assert RemoteStore("http://api.test", session=session).probe() is True
        assert session.get.call_args.kwargs["timeout"] == 2

        session.get.side_effect = requests.ConnectionError("refused")
        assert RemoteStore("http://api.test", session=session).probe() is False


class TestLocalStore:
    def test_missing_and_corrupt_files_read_empty(self, local):
        assert local.get(HABITS_KEY) == []
        local.path.write_text("{not json", encoding="utf-8")
        assert local.get(HABITS_KEY) == []

    def test_upsert_replaces_by_id(self, local):
        local.upsert(HABITS_KEY, {"id": "a", "name": "one"})
        local.upsert(HABITS_KEY, {"id": "a", "name": "two"})
        assert local.get(HABITS_KEY) == [{"id": "a", "name": "two"}]

    def test_delete_habit_cascades_entries(self, local):
        local.upsert(HABITS_KEY, {"id": "h1"})
        local.upsert(ENTRIES_KEY, {"id": "e1", "habit_id": "h1"})
        local.upsert(ENTRIES_KEY, {"id": "e2", "habit_id": "h2"})

        assert local.delete(HABITS_KEY, "h1") is True
        assert local.get(HABITS_KEY) == []
        assert [e["id"] for e in local.get(ENTRIES_KEY)] == ["e2"]
        assert local.delete(HABITS_KEY, "h1") is False


class TestOfflineGateway:
    def test_habits_round_trip_newest_first(self, offline):
        offline.upsert_habit(HabitRecord(id="old", name="Old", created_at=datetime(2024, 1, 1)))
        offline.upsert_habit(HabitRecord(id="new", name="New", created_at=datetime(2024, 2, 1)))
        assert [h.id for h in offline.list_habits()] == ["new", "old"]

    def test_entries_by_date_and_range(self, offline):
        offline.upsert_entry(EntryRecord(id="b", habit_id="h", date=MONDAY, scheduled_time="18:00"))
        offline.upsert_entry(EntryRecord(id="a", habit_id="h", date=MONDAY, scheduled_time="07:00"))
        offline.upsert_entry(EntryRecord(id="c", habit_id="h", date=date(2024, 3, 6)))

        assert [e.id for e in offline.list_entries_by_date(MONDAY)] == ["a", "b"]
        assert [e.id for e in offline.list_entries_in_range(MONDAY, date(2024, 3, 5))] == ["a", "b"]

    def test_notes_get_timestamps(self, offline):
        saved = offline.upsert_note(NoteRecord(title="Idea"))
        assert saved.created_at is not None
        assert [n.title for n in offline.list_notes()] == ["Idea"]
        offline.delete_note(saved.id)
        assert offline.list_notes() == []

    def test_wire_fields_are_snake_case(self, offline, local):
        offline.upsert_entry(EntryRecord(id="e", habit_id="h", date=MONDAY))
        [stored] = local.get(ENTRIES_KEY)
        assert stored["habit_id"] == "h"
        assert stored["scheduled_time"] == "09:00"
        assert stored["date"] == "2024-03-04"


class TestOnlineGateway:
    def test_reads_use_api(self, online, session):
        session.request.return_value = _response(
            200, {"ok": True, "habits": [{"id": "h1", "name": "Read", "frequency": "daily"}]}
        )
        habits = online.list_habits()
        assert [h.id for h in habits] == ["h1"]
        method, url = session.request.call_args.args
        assert (method, url) == ("GET", "http://api.test/api/habits")

    def test_bearer_token_on_session(self):
        remote = RemoteStore("http://api.test", token="tok", session=requests.Session())
        assert remote.session.headers["Authorization"] == "Bearer tok"

    def test_habit_read_failure_falls_back_to_local(self, online, session, local):
        local.upsert(HABITS_KEY, HabitRecord(id="cached", name="Cached").to_wire())
        session.request.return_value = _response(500, {"ok": False, "error": "unexpected_error"})
        assert [h.id for h in online.list_habits()] == ["cached"]

    def test_entry_read_failure_is_empty(self, online, session):
        session.request.side_effect = requests.ConnectionError("reset")
        assert online.list_entries_by_date(MONDAY) == []
        assert online.last_read_failed is True
        assert online.list_notes() == []

    def test_write_failure_raises(self, online, session):
        session.request.return_value = _response(409, {"ok": False, "error": "duplicate"})
        with pytest.raises(GatewayError) as excinfo:
            online.upsert_entry(EntryRecord(habit_id="h", date=MONDAY))
        assert excinfo.value.status_code == 409
        assert excinfo.value.error == "duplicate"

    def test_unreachable_write_lands_locally(self, online, session, local):
        session.request.side_effect = requests.ConnectionError("reset")
        online.upsert_entry(EntryRecord(id="e1", habit_id="h", date=MONDAY))
        assert [e["id"] for e in local.get(ENTRIES_KEY)] == ["e1"]


class TestDayPlanner:
    def test_add_habit_materializes_week(self, offline):
        planner = DayPlanner(offline)
        created = planner.add_habit(HabitRecord(id="h1", name="Read", frequency="weekdays"), today=MONDAY)

        assert [e.date.day for e in created] == [4, 5, 6, 7, 8]
        assert len(offline.list_entries_in_range(MONDAY, date(2024, 3, 10))) == 5

    def test_load_range_materializes_today_once(self, offline):
        offline.upsert_habit(HabitRecord(id="h1", name="Read"))
        planner = DayPlanner(offline)
        planner.load_habits()

        first = planner.load_range(MONDAY, date(2024, 3, 10), today=MONDAY)
        second = planner.load_range(MONDAY, date(2024, 3, 10), today=MONDAY)
        assert len(first) == 1
        assert [e.id for e in second] == [e.id for e in first]

    def test_unreachable_range_read_creates_nothing(self, online, session, local):
        planner = DayPlanner(online)
        planner.habits = [HabitRecord(id="h1", name="Read")]
        session.request.side_effect = requests.ConnectionError("reset")

        for _ in range(3):
            assert planner.load_range(MONDAY, date(2024, 3, 10), today=MONDAY) == []
        assert local.get(ENTRIES_KEY) == []

    def test_failed_range_read_does_not_post_entries(self, online, session):
        planner = DayPlanner(online)
        planner.habits = [HabitRecord(id="h1", name="Read")]
        session.request.return_value = _response(500, {"ok": False, "error": "unexpected_error"})

        assert planner.load_range(MONDAY, date(2024, 3, 10), today=MONDAY) == []
        assert [c.args[0] for c in session.request.call_args_list] == ["GET"]

    def test_toggle_and_reschedule(self, offline):
        planner = DayPlanner(offline)
        planner.add_habit(
            HabitRecord(id="h1", name="Read", created_at=datetime(2024, 3, 1)), today=MONDAY
        )
        entry = planner.entries[0]

        done = planner.toggle_complete(entry, now=datetime(2024, 3, 4, 9, 5))
        assert done.completed is True
        assert done.completed_at == datetime(2024, 3, 4, 9, 5)
        assert planner.streaks(today=MONDAY) == {"h1": 1}

        moved = planner.reschedule(done, "07:30")
        assert moved.scheduled_time == "07:30"
        [stored] = offline.list_entries_by_date(MONDAY)
        assert stored.scheduled_time == "07:30"
        assert stored.completed is True

        undone = planner.toggle_complete(moved)
        assert undone.completed_at is None
