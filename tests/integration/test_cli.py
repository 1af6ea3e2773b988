"""Integration tests for the dnc CLI."""

import json

import pytest
from typer.testing import CliRunner

from dnc import __version__
from dnc.interfaces.cli import app

runner = CliRunner()


@pytest.fixture
def project(data_dir):
    """proj-x with step-1; returns the --data-dir arguments."""
    args = ["--data-dir", str(data_dir)]
    runner.invoke(app, ["init", "proj-x", "-g", "Ship it", "-a", "Released", *args])
    runner.invoke(app, ["append", "proj-x", "proj-x", "step-1", "-g", "First", "-a", "Merged", *args])
    return args


class TestCli:
    """Test cases for the top-level commands."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_init_and_list(self, project):
        result = runner.invoke(app, ["list", *project])
        assert result.exit_code == 0
        assert result.output.strip() == "proj-x"

    def test_init_duplicate_fails(self, project):
        result = runner.invoke(app, ["init", "proj-x", "-g", "g", "-a", "a", *project])
        assert result.exit_code == 1

    def test_show(self, project):
        result = runner.invoke(app, ["show", "proj-x", *project])
        assert result.exit_code == 0
        assert "- proj-x [ ] Ship it" in result.output
        assert "  - step-1 [ ] First" in result.output

    def test_show_json(self, project):
        result = runner.invoke(app, ["show", "proj-x", "--json", *project])
        assert json.loads(result.output)["tasks"][0]["id"] == "step-1"

    def test_update(self, project):
        result = runner.invoke(app, ["update", "proj-x", "step-1", "--status", "accept", *project])
        assert result.exit_code == 0

        shown = runner.invoke(app, ["show", "proj-x", "--json", *project])
        assert json.loads(shown.output)["tasks"][0]["status"] == "accept"

    def test_update_bad_status(self, project):
        result = runner.invoke(app, ["update", "proj-x", "step-1", "--status", "pending", *project])
        assert result.exit_code == 1

    def test_remove(self, project):
        result = runner.invoke(app, ["remove", "proj-x", "step-1", "--yes", *project])
        assert result.exit_code == 0

        shown = runner.invoke(app, ["show", "proj-x", "--json", *project])
        assert json.loads(shown.output)["tasks"] == []

    def test_batch(self, project, tmp_path):
        updates = tmp_path / "updates.json"
        updates.write_text(
            json.dumps(
                {
                    "updates": [
                        {"taskId": "step-1", "rootTaskId": "proj-x", "status": "done"},
                        {"taskId": "ghost", "rootTaskId": "proj-x", "status": "done"},
                    ]
                }
            )
        )
        result = runner.invoke(app, ["batch", str(updates), *project])
        assert result.exit_code == 2

        shown = runner.invoke(app, ["show", "proj-x", "--json", *project])
        assert json.loads(shown.output)["tasks"][0]["status"] == "done"


class TestCommandGroups:
    """The same commands are reachable under `dnc task` and `dnc server`."""

    def test_task_group(self, project):
        result = runner.invoke(app, ["task", "list", *project])
        assert result.exit_code == 0
        assert result.output.strip() == "proj-x"

    def test_task_group_update(self, project):
        result = runner.invoke(app, ["task", "update", "proj-x", "step-1", "-s", "hold", *project])
        assert result.exit_code == 0

        shown = runner.invoke(app, ["task", "show", "proj-x", "--json", *project])
        assert json.loads(shown.output)["tasks"][0]["status"] == "hold"

    def test_server_group_help(self):
        result = runner.invoke(app, ["server", "--help"])
        assert result.exit_code == 0
        assert "serve" in result.output
        assert "mcp" in result.output
