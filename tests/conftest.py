"""Shared fixtures for dnc tests."""

from pathlib import Path

import pytest

from dnc.application import BatchUpdateCoordinator, HistoryRecorder, TaskTreeService
from dnc.domain.task import Task, TaskStatus
from dnc.infrastructure.storage import TaskTreeRepository


class RecordingRepository(TaskTreeRepository):
    """Repository that counts loads and saves per root id."""

    def __init__(self, data_dir: Path) -> None:
        super().__init__(data_dir)
        self.loads: dict[str, int] = {}
        self.saves: dict[str, int] = {}

    def load(self, root_id):
        self.loads[root_id] = self.loads.get(root_id, 0) + 1
        return super().load(root_id)

    def save(self, root_id, tree):
        self.saves[root_id] = self.saves.get(root_id, 0) + 1
        return super().save(root_id, tree)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty data directory."""
    path = tmp_path / ".dnc"
    path.mkdir()
    return path


@pytest.fixture
def repository(data_dir: Path) -> RecordingRepository:
    return RecordingRepository(data_dir)


@pytest.fixture
def history() -> HistoryRecorder:
    return HistoryRecorder()


@pytest.fixture
def service(repository, history) -> TaskTreeService:
    return TaskTreeService(repository, history)


@pytest.fixture
def coordinator(repository, history) -> BatchUpdateCoordinator:
    return BatchUpdateCoordinator(repository, history)


@pytest.fixture
def sample_tree() -> Task:
    """proj-x with two children, the first having one grandchild.

    proj-x
    ├── design
    │   └── schema
    └── build
    """
    return Task(
        id="proj-x",
        goal="Ship the project",
        acceptance="Released",
        tasks=[
            Task(
                id="design",
                goal="Design it",
                acceptance="Reviewed",
                tasks=[Task(id="schema", goal="Draft schema", acceptance="Merged")],
            ),
            Task(id="build", goal="Build it", acceptance="Tests pass", status=TaskStatus.ACCEPT),
        ],
    )
