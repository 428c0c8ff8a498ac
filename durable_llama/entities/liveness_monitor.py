import time
from typing import Callable

DEFAULT_STALL_THRESHOLD = 5.0


class LivenessMonitor:
    """Track how long the inference process has gone without producing output."""

    def __init__(self, stall_threshold: float = DEFAULT_STALL_THRESHOLD, clock: Callable[[], float] = time.monotonic):
        self.stall_threshold = stall_threshold
        self.clock = clock
        self.last_output_time = clock()

    def touch(self):
        """Record that output was just observed or the process was just (re)started."""
        self.last_output_time = self.clock()

    def seconds_since_output(self) -> float:
        return self.clock() - self.last_output_time

    def stalled(self) -> bool:
        return self.seconds_since_output() >= self.stall_threshold
