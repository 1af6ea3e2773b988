"""Unit tests for the in-memory history recorder."""

from dnc.application import HistoryRecorder, NullNotifier
from dnc.domain.task import TaskUpdated


class TestHistoryRecorder:
    """Test cases for HistoryRecorder."""

    def test_notify_records_event(self):
        recorder = HistoryRecorder()
        recorder.notify(TaskUpdated(root_id="proj-x", task_id="a", fields=["status"]))

        [entry] = recorder.get_history()
        assert entry.tool_name == "TaskUpdated"
        assert entry.root_id == "proj-x"
        assert entry.request["fields"] == ["status"]

    def test_filter_by_tool_name(self):
        recorder = HistoryRecorder()
        recorder.record("dnc_init_task", {"task_id": "a"}, {"text": "ok"})
        recorder.record("dnc_list_root_tasks", {}, {"text": "none"})

        assert [e.tool_name for e in recorder.get_history("dnc_init_task")] == ["dnc_init_task"]
        assert len(recorder.get_history()) == 2

    def test_returns_copies(self):
        recorder = HistoryRecorder()
        recorder.record("t", {}, None)
        recorder.get_history()[0].tool_name = "changed"
        assert recorder.get_history()[0].tool_name == "t"

    def test_max_entries(self):
        recorder = HistoryRecorder(max_entries=3)
        for i in range(5):
            recorder.record(f"t{i}", {}, None)
        assert [e.tool_name for e in recorder.get_history()] == ["t2", "t3", "t4"]

    def test_clear(self):
        recorder = HistoryRecorder()
        recorder.record("t", {}, None)
        recorder.clear()
        assert recorder.get_history() == []


def test_null_notifier_accepts_events():
    assert NullNotifier().notify(TaskUpdated(root_id="r", task_id="a", fields=[])) is None
