import pytest

from ramadan_tracker.catalog import find_activity
from ramadan_tracker.editing import (
    EditorError,
    EditorState,
    SessionEditor,
    default_start_time,
)
from ramadan_tracker.models import ActivityTimeRecord, Session
from ramadan_tracker.sessions import MULTI_SESSION_MARKER

from conftest import TODAY


class FakeRecorder:
    def __init__(self):
        self.calls = []

    def toggle_activity(self, activity_id, start_time=None, end_time=None):
        self.calls.append(("toggle", activity_id, start_time, end_time))
        return True

    def update_activity_time(self, activity_id, start_time, end_time):
        self.calls.append(("update", activity_id, start_time, end_time))


@pytest.fixture
def subuh():
    return find_activity("subuh")


@pytest.mark.parametrize(
    ("schedule", "expected"),
    [
        ("04:30", "04:30"),
        ("4:30 pagi", "04:30"),
        ("12:00 - 13:00", "12:00"),
        ("Setelah Subuh/Maghrib", ""),
        ("jam 0430", "0430"),
        ("", ""),
        (None, ""),
    ],
)
def test_default_start_time(schedule, expected):
    assert default_start_time(schedule) == expected


def test_new_editor_starts_from_schedule(subuh):
    editor = SessionEditor.open(subuh, None, completed=False)
    assert editor.state is EditorState.NEW
    assert editor.sessions == [Session("04:30", "")]


def test_editing_editor_decodes_record(subuh):
    record = ActivityTimeRecord('[{"start":"04:35","end":"04:50"},{"start":"05:00","end":""}]', MULTI_SESSION_MARKER)
    editor = SessionEditor.open(subuh, record, completed=True)
    assert editor.state is EditorState.EDITING
    assert editor.sessions == [Session("04:35", "04:50"), Session("05:00", "")]


def test_editing_editor_without_time_data_shows_one_empty_row(subuh):
    editor = SessionEditor.open(subuh, ActivityTimeRecord(None, None), completed=True)
    assert editor.sessions == [Session()]


def test_buffer_operations(subuh):
    editor = SessionEditor.open(subuh, None, completed=False)
    editor.add_session()
    editor.update_session(1, "start", "05:00")
    editor.update_session(1, "end", "05:20")
    assert editor.sessions == [Session("04:30", ""), Session("05:00", "05:20")]

    editor.remove_session(0)
    assert editor.sessions == [Session("05:00", "05:20")]

    editor.remove_session(0)
    assert editor.sessions == [Session("05:00", "05:20")]


def test_update_rejects_unknown_field(subuh):
    editor = SessionEditor.open(subuh, None, completed=False)
    with pytest.raises(ValueError):
        editor.update_session(0, "duration", "10")


def test_buffer_edits_do_not_touch_the_record(subuh):
    record = ActivityTimeRecord("04:30", "05:00")
    editor = SessionEditor.open(subuh, record, completed=True)
    editor.update_session(0, "start", "04:45")
    assert record == ActivityTimeRecord("04:30", "05:00")


def test_save_new_single_session(subuh):
    recorder = FakeRecorder()
    editor = SessionEditor.open(subuh, None, completed=False)
    editor.update_session(0, "end", "04:50")

    record = editor.save(recorder)

    assert record == ActivityTimeRecord("04:30", "04:50")
    assert recorder.calls == [("toggle", "subuh", "04:30", "04:50")]
    assert editor.state is EditorState.EDITING


def test_save_new_without_valid_sessions_completes_without_time(subuh):
    recorder = FakeRecorder()
    editor = SessionEditor.open(subuh, None, completed=False)
    editor.update_session(0, "start", "")

    editor.save(recorder)

    assert recorder.calls == [("toggle", "subuh", None, None)]


def test_save_editing_multi_session(subuh):
    recorder = FakeRecorder()
    editor = SessionEditor.open(subuh, ActivityTimeRecord("04:30", None), completed=True)
    editor.add_session()
    editor.update_session(1, "start", "05:00")

    record = editor.save(recorder)

    assert record.end_time == MULTI_SESSION_MARKER
    assert recorder.calls == [("update", "subuh", record.start_time, MULTI_SESSION_MARKER)]
    assert editor.sessions == [Session("04:30", ""), Session("05:00", "")]


def test_skip_new_completes_without_time(subuh):
    recorder = FakeRecorder()
    editor = SessionEditor.open(subuh, None, completed=False)
    editor.skip(recorder)
    assert recorder.calls == [("toggle", "subuh", None, None)]
    assert editor.state is EditorState.EDITING


def test_skip_editing_is_a_no_op(subuh):
    recorder = FakeRecorder()
    editor = SessionEditor.open(subuh, ActivityTimeRecord("04:30", None), completed=True)
    editor.skip(recorder)
    assert recorder.calls == []
    assert editor.state is EditorState.EDITING


def test_uncomplete_resets_buffer(subuh):
    recorder = FakeRecorder()
    editor = SessionEditor.open(subuh, ActivityTimeRecord("04:40", "05:00"), completed=True)
    editor.uncomplete(recorder)
    assert recorder.calls == [("toggle", "subuh", None, None)]
    assert editor.state is EditorState.NEW
    assert editor.sessions == [Session("04:30", "")]


def test_uncomplete_requires_editing_state(subuh):
    editor = SessionEditor.open(subuh, None, completed=False)
    with pytest.raises(EditorError):
        editor.uncomplete(FakeRecorder())


def test_editor_against_tracker(tracker):
    editor = tracker.open_editor(TODAY, "tadarus")
    assert editor.state is EditorState.NEW
    assert editor.sessions == [Session("", "")]

    editor.update_session(0, "start", "05:00")
    editor.update_session(0, "end", "05:30")
    editor.add_session()
    editor.update_session(1, "start", "19:00")
    editor.update_session(1, "end", "19:45")
    editor.save(tracker.for_day(TODAY))

    reopened = tracker.open_editor(TODAY, "tadarus")
    assert reopened.state is EditorState.EDITING
    assert reopened.sessions == [Session("05:00", "05:30"), Session("19:00", "19:45")]

    reopened.uncomplete(tracker.for_day(TODAY))
    assert tracker.get_time_record(TODAY, "tadarus") is None
    assert not tracker.is_completed(TODAY, "tadarus")


@pytest.mark.parametrize("index", [-1, 1, 5])
def test_positions_outside_the_buffer_are_rejected(subuh, index):
    editor = SessionEditor.open(subuh, None, completed=False)
    editor.add_session()
    editor.remove_session(1)
    with pytest.raises(EditorError):
        editor.remove_session(index)
    with pytest.raises(EditorError):
        editor.update_session(index, "start", "05:00")
    assert editor.sessions == [Session("04:30", "")]


def test_negative_position_does_not_drop_the_last_row(subuh):
    editor = SessionEditor.open(subuh, None, completed=False)
    editor.add_session()
    editor.update_session(1, "start", "05:00")
    with pytest.raises(EditorError):
        editor.remove_session(-1)
    assert len(editor.sessions) == 2
