import asyncio
from unittest.mock import MagicMock, patch

import pytest

from syncwand.probe import PS_COMMAND, find_sync_command, probe
from syncwand.types import ClusterContext, Container, ExecResult, ProbeResult

CONTAINER = Container("web", "web-1", "app")

PS_OUTPUT = """COMMAND
/bin/sh -c sleep infinity
/tmp/devspacehelper sync downstream --exclude node_modules
/tmp/devspacehelper sync upstream --initial
ps -x -o command
"""


class TestFindSyncCommand:
    """Tests for find_sync_command function."""

    def test_returns_first_matching_line(self):
        assert (
            find_sync_command(PS_OUTPUT)
            == "/tmp/devspacehelper sync downstream --exclude node_modules"
        )

    def test_unrelated_commands_do_not_match(self):
        output = "COMMAND\nnode server.js\n/tmp/devspacehelper restart\n"

        assert find_sync_command(output) is None

    def test_signature_must_start_the_line(self):
        output = "COMMAND\nsh -c /tmp/devspacehelper sync --initial\n"

        assert find_sync_command(output) is None

    def test_empty_output(self):
        assert find_sync_command("") is None


class TestProbe:
    """Tests for probe function."""

    @patch("syncwand.probe.exec_in_container")
    def test_sync_running(self, mock_exec: MagicMock):
        mock_exec.return_value = ExecResult(success=True, stdout=PS_OUTPUT)
        ctx = ClusterContext()

        result = asyncio.run(probe(ctx, CONTAINER))

        assert result == ProbeResult(
            container=CONTAINER,
            sync_running=True,
            command="/tmp/devspacehelper sync downstream --exclude node_modules",
        )
        mock_exec.assert_called_once_with(ctx, CONTAINER, PS_COMMAND)

    @pytest.mark.parametrize(
        "exec_result",
        [
            ExecResult(success=True, stdout=""),
            ExecResult(success=True, stdout="COMMAND\nnginx: master process\n"),
            ExecResult(success=False, stdout=PS_OUTPUT, message="exited with 1"),
        ],
        ids=["empty-output", "unrelated-output", "failed-exec"],
    )
    @patch("syncwand.probe.exec_in_container")
    def test_negative_results(self, mock_exec: MagicMock, exec_result: ExecResult):
        mock_exec.return_value = exec_result

        result = asyncio.run(probe(ClusterContext(), CONTAINER))

        assert result.sync_running is False
        assert result.command is None
        assert result.container == CONTAINER

    @patch("syncwand.probe.exec_in_container")
    def test_unexpected_error_is_negative(self, mock_exec: MagicMock):
        mock_exec.side_effect = RuntimeError("boom")

        result = asyncio.run(probe(ClusterContext(), CONTAINER))

        assert result == ProbeResult(container=CONTAINER, sync_running=False)


class TestProbeResult:
    def test_command_requires_sync_running(self):
        with pytest.raises(ValueError):
            ProbeResult(container=CONTAINER, sync_running=False, command="ps")
