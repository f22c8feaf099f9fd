"""Tests for ExecutionError and SubprocessExecutor."""

import asyncio
import os
import sys

import pytest

from command_execution import CommandExecutor, ExecutionError, SubprocessExecutor
from conftest import FakeExecutor


class TestExecutionError:
    """Test ExecutionError message formatting."""

    def test_exit_status_message(self):
        """The message names the program, status and first stderr line."""
        error = ExecutionError(["v4l2-ctl", "-d", "/dev/video9", "-l"], 1, "Cannot open device\nmore\n")
        assert str(error) == "v4l2-ctl exited with status 1: Cannot open device"
        assert error.argv == ["v4l2-ctl", "-d", "/dev/video9", "-l"]

    def test_no_stderr(self):
        error = ExecutionError(["ffmpeg"], 2)
        assert str(error) == "ffmpeg exited with status 2: no error output"

    def test_timeout_message(self):
        error = ExecutionError(["ffmpeg", "-i", "/dev/video0"], None, timed_out=True)
        assert str(error) == "ffmpeg timed out"
        assert error.exit_code is None


class TestCommandExecutorProtocol:
    """Test CommandExecutor structural typing."""

    def test_subprocess_executor_conforms(self):
        assert isinstance(SubprocessExecutor(), CommandExecutor)

    def test_fake_executor_conforms(self):
        """Test doubles only need an execute() coroutine."""
        assert isinstance(FakeExecutor(), CommandExecutor)


class TestSubprocessExecutor:
    """Test SubprocessExecutor against real child processes."""

    @pytest.mark.asyncio
    async def test_returns_stdout(self):
        executor = SubprocessExecutor()
        output = await executor.execute([sys.executable, "-c", "print('min=0 max=1')"])
        assert output.strip() == "min=0 max=1"

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self):
        """Non-zero exit raises with the status and captured stderr."""
        executor = SubprocessExecutor()
        script = "import sys; sys.stderr.write('VIDIOC_S_CTRL: failed\\n'); sys.exit(3)"
        with pytest.raises(ExecutionError) as exc_info:
            await executor.execute([sys.executable, "-c", script])
        assert exc_info.value.exit_code == 3
        assert "VIDIOC_S_CTRL: failed" in exc_info.value.stderr
        assert exc_info.value.timed_out is False

    @pytest.mark.asyncio
    async def test_missing_program(self, tmp_path):
        """A program that cannot be started is reported as exit 127."""
        executor = SubprocessExecutor()
        with pytest.raises(ExecutionError) as exc_info:
            await executor.execute([str(tmp_path / "no-such-v4l2-ctl"), "-l"])
        assert exc_info.value.exit_code == 127

    @pytest.mark.asyncio
    async def test_empty_argv(self):
        with pytest.raises(ExecutionError):
            await SubprocessExecutor().execute([])

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self):
        """A command running past the timeout fails as timed out."""
        executor = SubprocessExecutor(timeout=10.0)
        with pytest.raises(ExecutionError) as exc_info:
            await executor.execute([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.2)
        assert exc_info.value.timed_out is True

    @pytest.mark.asyncio
    async def test_cancel_kills_process(self, tmp_path):
        """Cancelling the awaiting task kills and reaps the child."""
        pid_file = tmp_path / "pid"
        script = "import os, sys, time; open(sys.argv[1], 'w').write(str(os.getpid())); time.sleep(30)"
        task = asyncio.create_task(
            SubprocessExecutor(timeout=60.0).execute([sys.executable, "-c", script, str(pid_file)])
        )
        for _ in range(200):
            if pid_file.exists() and pid_file.read_text():
                break
            await asyncio.sleep(0.05)
        pid = int(pid_file.read_text())

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self):
        """Undecodable output does not raise."""
        executor = SubprocessExecutor()
        script = "import sys; sys.stdout.buffer.write(b'name\\xff\\n')"
        output = await executor.execute([sys.executable, "-c", script])
        assert output.startswith("name")
