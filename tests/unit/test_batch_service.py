"""Unit tests for batch parsing, validation and the coordinator."""

import pytest

from dnc.application import (
    BatchUpdateCoordinator,
    TaskUpdateRequest,
    group_by_root,
    parse_batch,
    validate_batch,
)
from dnc.domain.shared import Err, Ok, StorageIOError, ValidationError
from dnc.domain.task import TaskStatus, find_task


def _request(task_id, root_id, status=None, instructions=None) -> TaskUpdateRequest:
    return TaskUpdateRequest(
        task_id=task_id,
        root_task_id=root_id,
        status=status,
        additional_instructions=instructions,
    )


@pytest.fixture
def two_roots(service, repository):
    """Roots 'alpha' (a-1, a-2) and 'beta' (b-1); counters reset afterwards."""
    service.init_root("alpha", "Alpha", "A")
    service.append_child("alpha", "alpha", "a-1", "A1", "A1")
    service.append_child("alpha", "alpha", "a-2", "A2", "A2")
    service.init_root("beta", "Beta", "B")
    service.append_child("beta", "beta", "b-1", "B1", "B1")
    repository.loads.clear()
    repository.saves.clear()
    return repository


class TestParseBatch:
    """Test cases for parse_batch."""

    def test_camel_case_input(self):
        result = parse_batch([{"taskId": "a", "rootTaskId": "r", "status": "done"}])
        assert isinstance(result, Ok)
        assert result.value[0].root_task_id == "r"

    def test_not_a_list(self):
        result = parse_batch({"taskId": "a"})
        assert str(result.error) == "Updates must be an array"

    def test_missing_field(self):
        result = parse_batch([{"taskId": "a", "rootTaskId": "r"}, {"taskId": "b"}])
        assert isinstance(result.error, ValidationError)
        assert "updates[1]" in str(result.error)
        assert "rootTaskId" in str(result.error)


class TestValidateBatch:
    """Test cases for validate_batch."""

    def test_empty(self):
        result = validate_batch([])
        assert str(result.error) == "Updates array cannot be empty"

    def test_invalid_status(self):
        result = validate_batch([_request("a", "r", status="done"), _request("b", "r", status="finished")])
        assert isinstance(result, Err)
        assert "updates[1]" in str(result.error)
        assert "Invalid status" in str(result.error)

    def test_pending_status(self):
        assert "Invalid status" in str(validate_batch([_request("a", "r", status="pending")]).error)

    def test_invalid_id(self):
        result = validate_batch([_request("Bad", "r", status="done")])
        assert "Invalid taskId" in str(result.error)

    def test_nothing_to_change(self):
        result = validate_batch([_request("a", "r")])
        assert "provide status or additionalInstructions" in str(result.error)

    def test_empty_instructions_count_as_change(self):
        assert isinstance(validate_batch([_request("a", "r", instructions="")]), Ok)


class TestGroupByRoot:
    def test_groups_keep_order(self):
        planned = validate_batch(
            [
                _request("b-1", "beta", status="done"),
                _request("a-1", "alpha", status="done"),
                _request("b-2", "beta", status="hold"),
            ]
        ).value
        groups = group_by_root(planned)

        assert list(groups) == ["beta", "alpha"]
        assert [update.index for update in groups["beta"]] == [0, 2]


class TestBatchUpdateCoordinator:
    """Test cases for BatchUpdateCoordinator.apply."""

    def test_one_load_and_save_per_root(self, coordinator, two_roots):
        requests = [
            _request("a-1", "alpha", status="done"),
            _request("b-1", "beta", status="hold"),
            _request("a-2", "alpha", instructions="Later"),
            _request("alpha", "alpha", status="in-progress"),
        ]
        response = coordinator.apply(requests).value

        assert [r.success for r in response.results] == [True, True, True, True]
        assert two_roots.loads == {"alpha": 1, "beta": 1}
        assert two_roots.saves == {"alpha": 1, "beta": 1}

        alpha = two_roots.load("alpha").value
        assert find_task(alpha, "a-1").status == TaskStatus.DONE
        assert find_task(alpha, "a-2").additional_instructions == "Later"
        assert alpha.status == TaskStatus.IN_PROGRESS

    def test_results_in_input_order(self, coordinator, two_roots):
        requests = [
            _request("b-1", "beta", status="done"),
            _request("ghost", "alpha", status="done"),
            _request("a-1", "alpha", status="done"),
        ]
        results = coordinator.apply(requests).value.results

        assert [r.task_id for r in results] == ["b-1", "ghost", "a-1"]
        assert [r.success for r in results] == [True, False, True]
        assert results[1].error == "target not found: ghost"

    def test_missing_root(self, coordinator, two_roots):
        results = coordinator.apply(
            [_request("x", "nowhere", status="done"), _request("a-1", "alpha", status="done")]
        ).value.results

        assert results[0].success is False
        assert results[0].error == "root not found: nowhere"
        assert results[1].success is True
        assert "nowhere" not in two_roots.saves

    def test_load_failure_fails_group_only(self, coordinator, two_roots, data_dir):
        """A corrupt root fails its own requests; other roots still apply."""
        corrupt = data_dir / "bad" / "task.json"
        corrupt.parent.mkdir()
        corrupt.write_text("{not json")

        results = coordinator.apply(
            [_request("x", "bad", status="done"), _request("a-1", "alpha", status="done")]
        ).value.results

        assert results[0].success is False
        assert results[0].error.startswith("corrupt task tree: bad: invalid JSON")
        assert str(data_dir) not in results[0].error
        assert results[1].success is True
        assert "bad" not in two_roots.saves
        assert corrupt.read_text() == "{not json"

    def test_no_save_when_nothing_matched(self, coordinator, two_roots):
        response = coordinator.apply([_request("ghost", "alpha", status="done")]).value

        assert response.success is True
        assert response.results[0].success is False
        assert two_roots.saves == {}

    def test_later_request_wins(self, coordinator, two_roots):
        coordinator.apply(
            [_request("a-1", "alpha", status="accept"), _request("a-1", "alpha", status="hold")]
        )
        assert find_task(two_roots.load("alpha").value, "a-1").status == TaskStatus.HOLD

    def test_validation_failure_touches_nothing(self, coordinator, two_roots):
        result = coordinator.apply(
            [_request("a-1", "alpha", status="done"), _request("b-1", "beta", status="bogus")]
        )

        assert isinstance(result, Err)
        assert two_roots.loads == {}
        assert two_roots.saves == {}

    def test_save_failure_fails_group_only(self, two_roots, history, monkeypatch):
        original_save = two_roots.save

        def failing_save(root_id, tree):
            if root_id == "alpha":
                return Err(StorageIOError("Error writing alpha: disk full", field=root_id))
            return original_save(root_id, tree)

        monkeypatch.setattr(two_roots, "save", failing_save)
        coordinator = BatchUpdateCoordinator(two_roots, history)
        results = coordinator.apply(
            [
                _request("a-1", "alpha", status="done"),
                _request("ghost", "alpha", status="done"),
                _request("b-1", "beta", status="done"),
            ]
        ).value.results

        assert results[0].success is False
        assert "disk full" in results[0].error
        assert results[1].error == "target not found: ghost"
        assert results[2].success is True

    def test_notifies_once_per_saved_root(self, coordinator, two_roots, history):
        history.clear()
        coordinator.apply(
            [
                _request("a-1", "alpha", status="done"),
                _request("a-2", "alpha", status="done"),
                _request("ghost", "beta", status="done"),
            ]
        )
        entries = history.get_history("BatchApplied")
        assert len(entries) == 1
        assert entries[0].root_id == "alpha"
        assert entries[0].request["task_ids"] == ["a-1", "a-2"]


class TestBatchScenario:
    def test_one_done_child_and_a_ghost(self, service, coordinator):
        """init proj-x, append step-1, batch step-1 done plus a ghost."""
        service.init_root("proj-x", "Ship it", "Released")
        service.append_child("proj-x", "proj-x", "step-1", "First", "Merged")

        response = coordinator.apply(
            parse_batch(
                [
                    {"taskId": "step-1", "rootTaskId": "proj-x", "status": "done"},
                    {"taskId": "ghost", "rootTaskId": "proj-x", "status": "done"},
                ]
            ).value
        ).value

        assert response.to_document() == {
            "success": True,
            "results": [
                {"taskId": "step-1", "success": True},
                {"taskId": "ghost", "success": False, "error": "target not found: ghost"},
            ],
        }
        tree = service.get_tree("proj-x").value
        assert len(tree.tasks) == 1
        assert tree.tasks[0].status == TaskStatus.DONE
