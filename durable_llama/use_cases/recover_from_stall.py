from enum import Enum
from typing import Callable

from durable_llama.entities.liveness_monitor import LivenessMonitor
from durable_llama.frameworks_drivers.process_supervisor import ProcessSupervisor
from durable_llama.frameworks_drivers.worker_registry import WorkerRegistry
from durable_llama.shared.logger import Logger
from durable_llama.shared.reachability_prober import DEFAULT_PROBE_TIMEOUT, ReachabilityProber

logger = Logger.get(__name__)


class StallOutcome(Enum):
    PARTIAL_REMOVAL = "partial_removal"  # some workers removed, others remain
    ALL_REACHABLE = "all_reachable"  # nothing removed, the process itself looks hung
    CPU_FALLBACK = "cpu_fallback"  # no workers left


class RecoverFromStall:
    """
    Handles an output stall: probe every available worker, drop the ones that no
    longer accept connections, then restart the inference process.
    """

    def __init__(
        self,
        registry: WorkerRegistry,
        supervisor: ProcessSupervisor,
        monitor: LivenessMonitor,
        probe: Callable[[str, int, float], bool] = ReachabilityProber.probe,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
    ):
        self.registry = registry
        self.supervisor = supervisor
        self.monitor = monitor
        self.probe = probe
        self.probe_timeout = probe_timeout

    def execute(self) -> StallOutcome:
        logger.warning(
            f"No output received for {self.monitor.seconds_since_output():.0f} seconds, attempting restart..."
        )

        candidates = self.registry.available_endpoints()
        if not candidates:
            logger.warning("No RPC servers left, restarting CPU-only inference...")
            self.supervisor.start()
            return StallOutcome.CPU_FALLBACK

        removed = 0
        for endpoint in candidates:
            if not self.probe(endpoint.connect_host, endpoint.port, self.probe_timeout):
                self.registry.mark_unavailable(endpoint)
                removed += 1
                logger.warning(f"Removing unreachable server {endpoint.address} and trying again...")

        # Reachable workers with no output may still be wedged; restart regardless.
        if removed == 0:
            outcome = StallOutcome.ALL_REACHABLE
            logger.warning("All RPC servers are reachable, but no output received. Restarting inference...")
        elif self.registry.all_unavailable():
            outcome = StallOutcome.CPU_FALLBACK
            logger.warning("No reachable RPC servers available, falling back to CPU...")
        else:
            outcome = StallOutcome.PARTIAL_REMOVAL
            remaining = ",".join(endpoint.address for endpoint in self.registry.available_endpoints())
            logger.warning(f"Continuing with remaining RPC servers: {remaining}")

        self.supervisor.start()
        return outcome
