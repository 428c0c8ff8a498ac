"""
Test configuration and fixtures for the durable llama supervisor tests.
"""
import sys
from typing import List

import pytest

from durable_llama.entities.invocation_template import InvocationTemplate
from durable_llama.entities.liveness_monitor import LivenessMonitor
from durable_llama.frameworks_drivers.worker_registry import WorkerRegistry
from durable_llama.use_cases.build_command import CommandBuilder

WORKER_A = "10.0.0.1:50053"
WORKER_B = "10.0.0.2:50052"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def monitor(clock):
    return LivenessMonitor(stall_threshold=5.0, clock=clock)


@pytest.fixture
def sample_arguments() -> List[str]:
    """A typical llama-cli invocation wrapped by the supervisor."""
    return ["-m", "models/llama-3-8b.Q4_K_M.gguf", "-p", "Once upon a time", "-ngl", "40", "--rpc", f"{WORKER_A},{WORKER_B}"]


@pytest.fixture
def template(sample_arguments):
    return InvocationTemplate.from_argv(sample_arguments)


@pytest.fixture
def registry(template):
    return WorkerRegistry.from_addresses(template.rpc_addresses)


@pytest.fixture
def command_builder(template, registry):
    return CommandBuilder("./llama-cli", template, registry)


def python_child_builder(code: str, rpc: str = "127.0.0.1:50052") -> CommandBuilder:
    """
    Command builder that runs the current interpreter as the inference executable.

    The rebuilt --rpc/-ngl flags land in the child's sys.argv and are ignored by the code.
    """
    template = InvocationTemplate.from_argv(["-c", code, "--rpc", rpc])
    registry = WorkerRegistry.from_addresses(template.rpc_addresses)
    return CommandBuilder(sys.executable, template, registry)
