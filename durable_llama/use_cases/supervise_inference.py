import time
from typing import Callable

from durable_llama.entities.liveness_monitor import LivenessMonitor
from durable_llama.frameworks_drivers.process_supervisor import ProcessSupervisor, ReapOutcome
from durable_llama.shared.logger import Logger
from durable_llama.shared.termination import TerminationToken
from durable_llama.use_cases.recover_from_stall import RecoverFromStall

logger = Logger.get(__name__)


class SuperviseInference:
    """
    The control loop. Each tick polls for output, checks for a stall, reaps the
    child and then sleeps for tick_interval. Runs until the child exits with
    status 0 or termination is requested, and always shuts the supervisor down.
    """

    def __init__(
        self,
        supervisor: ProcessSupervisor,
        monitor: LivenessMonitor,
        stall_recovery: RecoverFromStall,
        termination: TerminationToken,
        tick_interval: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.supervisor = supervisor
        self.monitor = monitor
        self.stall_recovery = stall_recovery
        self.termination = termination
        self.tick_interval = tick_interval
        self.sleep = sleep

    def _tick(self) -> bool:
        """Run one iteration. Returns False once the workload has completed."""
        self.supervisor.poll_output()

        if self.monitor.stalled():
            # The child may have finished inside the stall window; a restart would discard its status.
            if self.supervisor.reap() is ReapOutcome.EXITED_SUCCESS:
                logger.info("Inference completed successfully")
                return False
            self.stall_recovery.execute()

        outcome = self.supervisor.reap()
        if outcome is ReapOutcome.EXITED_SUCCESS:
            logger.info("Inference completed successfully")
            return False
        if outcome is ReapOutcome.EXITED_FAILURE:
            logger.warning("Inference process exited with non-zero status. Restarting...")
            self.supervisor.start()
        elif outcome is ReapOutcome.SIGNALED:
            logger.warning("Inference process was terminated by a signal. Restarting...")
            self.supervisor.start()
        return True

    def execute(self) -> int:
        """
        Supervise the inference process until completion or termination.

        Returns:
            Process exit code, 0 for both completion and requested termination
        """
        try:
            self.supervisor.start()
            while not self.termination.is_set():
                if not self._tick():
                    break
                self.sleep(self.tick_interval)
            else:
                logger.info("Termination requested, stopping supervision")
        finally:
            self.supervisor.shutdown()
        return 0
