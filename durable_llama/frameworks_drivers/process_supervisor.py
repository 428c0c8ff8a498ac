from __future__ import annotations

import os
import select
import signal
import subprocess
import sys
from enum import Enum
from typing import BinaryIO, List, Optional

from durable_llama.entities.liveness_monitor import LivenessMonitor
from durable_llama.frameworks_drivers.child_process import ChildProcess
from durable_llama.shared.errors import ProcessStartError
from durable_llama.shared.logger import Logger
from durable_llama.use_cases.build_command import CommandBuilder

logger = Logger.get(__name__)


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


class ReapOutcome(Enum):
    NONE = "none"
    EXITED_SUCCESS = "exited_success"
    EXITED_FAILURE = "exited_failure"
    SIGNALED = "signaled"


class ProcessSupervisor:
    """
    Owns the lifecycle of the single inference process: start, output polling,
    reaping, restart and shutdown.

    stdout and stderr of the child share one pipe, so both count toward liveness
    and both are forwarded verbatim to the operator's output stream.
    """

    def __init__(
        self,
        command_builder: CommandBuilder,
        monitor: LivenessMonitor,
        output: Optional[BinaryIO] = None,
        poll_timeout: float = 1.0,
        read_chunk_size: int = 4096,
        terminate_timeout: Optional[float] = 10.0,
    ):
        self.command_builder = command_builder
        self.monitor = monitor
        self.output = output if output is not None else sys.stdout.buffer
        self.poll_timeout = poll_timeout
        self.read_chunk_size = read_chunk_size
        self.terminate_timeout = terminate_timeout
        self.child = ChildProcess()
        self._start_failed = False
        self._shut_down = False

    @property
    def is_running(self) -> bool:
        process = self.child.process
        return process is not None and process.poll() is None

    @staticmethod
    def _terminate_process(process: subprocess.Popen | None, timeout: Optional[float]) -> None:
        """Terminate a subprocess, killing it if it outlives the timeout. None waits forever."""
        if process is not None:
            process.terminate()
            try:
                process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning(f"Process {process.pid} ignored SIGTERM for {timeout}s, killing it")
                process.kill()
                process.wait()

    def _stop_child(self) -> None:
        """Terminate and reap the current child, then release its pipe."""
        process = self.child.process
        if process is not None:
            if process.poll() is None:
                logger.info(f"Terminating inference process {process.pid}")
                self._terminate_process(process, self.terminate_timeout)
            self.child.process = None
        self.child.close_pipe()

    def _spawn(self, args: List[str], write_fd: int) -> subprocess.Popen:
        try:
            return subprocess.Popen(args, stdout=write_fd, stderr=write_fd)
        except OSError as e:
            raise ProcessStartError(args[0], e) from e

    def start(self) -> None:
        """
        (Re)start the inference process with the registry's current workers.

        Any running child is terminated and reaped and its pipe closed first. A
        spawn failure leaves no child behind and is reported by the next reap()
        as a failed exit, so the ordinary restart path handles it.
        """
        self._stop_child()

        args = self.command_builder.build_current()
        read_fd, write_fd = os.pipe()
        try:
            process = self._spawn(args, write_fd)
        except ProcessStartError as e:
            logger.error(str(e))
            os.close(read_fd)
            self._start_failed = True
            self.monitor.touch()
            return
        finally:
            os.close(write_fd)

        os.set_blocking(read_fd, False)
        self.child.process = process
        self.child.read_fd = read_fd
        self._start_failed = False
        self.monitor.touch()
        logger.info(f"Started inference process {process.pid}: {' '.join(args)}")

    def _forward(self, data: bytes) -> None:
        self.output.write(data)
        self.output.flush()
        self.monitor.touch()

    def poll_output(self) -> int:
        """
        Wait up to poll_timeout for output and forward one chunk of it.

        Returns:
            Number of bytes forwarded; 0 when nothing arrived in the window
        """
        read_fd = self.child.read_fd
        if read_fd is None:
            return 0

        ready, _, _ = select.select([read_fd], [], [], self.poll_timeout)
        if not ready:
            return 0
        try:
            data = os.read(read_fd, self.read_chunk_size)
        except BlockingIOError:
            return 0
        # Empty read means EOF: the child closed its end and reap() will notice.
        if not data:
            return 0
        self._forward(data)
        return len(data)

    def _drain_output(self) -> None:
        """Forward whatever an exited child left in the pipe."""
        read_fd = self.child.read_fd
        if read_fd is None:
            return
        while True:
            try:
                data = os.read(read_fd, self.read_chunk_size)
            except BlockingIOError:
                break
            if not data:
                break
            self._forward(data)

    def reap(self) -> ReapOutcome:
        """Non-blocking check of the child's status."""
        if self._start_failed:
            self._start_failed = False
            return ReapOutcome.EXITED_FAILURE

        process = self.child.process
        if process is None:
            return ReapOutcome.NONE
        returncode = process.poll()
        if returncode is None:
            return ReapOutcome.NONE

        self._drain_output()
        self.child.process = None
        self.child.close_pipe()

        if returncode < 0:
            logger.warning(f"Inference process was terminated by signal {_signal_name(-returncode)}.")
            return ReapOutcome.SIGNALED
        logger.info(f"Inference process exited with status {returncode}.")
        if returncode == 0:
            return ReapOutcome.EXITED_SUCCESS
        return ReapOutcome.EXITED_FAILURE

    def shutdown(self) -> None:
        """Terminate and reap any running child. Only the first call has an effect."""
        if self._shut_down:
            return
        self._shut_down = True
        self._stop_child()
        logger.info("Process supervisor shutdown complete")
