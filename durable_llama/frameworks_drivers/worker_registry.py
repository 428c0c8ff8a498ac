from typing import Iterable, List

from durable_llama.entities.worker_endpoint import DEFAULT_RPC_PORT, WorkerEndpoint
from durable_llama.shared.errors import ConfigurationError
from durable_llama.shared.logger import Logger
from durable_llama.shared.reachability_prober import ReachabilityProber

logger = Logger.get(__name__)


class WorkerRegistry:
    """
    Holds the configured RPC workers and their availability.

    Availability is a monotonic exclusion set: a worker that has been marked
    unavailable stays excluded for the rest of the run.
    """

    def __init__(self, endpoints: List[WorkerEndpoint]):
        if not endpoints:
            raise ConfigurationError("At least one RPC server must be configured")
        self.endpoints = endpoints

    @classmethod
    def from_addresses(cls, addresses: Iterable[str], default_port: int = DEFAULT_RPC_PORT) -> "WorkerRegistry":
        return cls([WorkerEndpoint.parse(address, default_port) for address in addresses])

    def resolve_addresses(self, resolve=ReachabilityProber.resolve) -> None:
        """
        Resolve every worker host once so that stall-time probes never wait on DNS.

        Raises:
            ConfigurationError: If a host name cannot be resolved
        """
        for endpoint in self.endpoints:
            try:
                endpoint.ip = resolve(endpoint.host, endpoint.port)
            except (OSError, UnicodeError) as e:
                raise ConfigurationError(f"Cannot resolve RPC server '{endpoint.address}': {e}") from e
            logger.debug(f"Resolved RPC server {endpoint.address} to {endpoint.ip}")

    def available_endpoints(self) -> List[WorkerEndpoint]:
        """Available endpoints in configuration order."""
        return [endpoint for endpoint in self.endpoints if endpoint.available]

    def mark_unavailable(self, endpoint: WorkerEndpoint) -> bool:
        """
        Exclude an endpoint from future restarts.

        Returns:
            True if the endpoint was available before this call, False otherwise
        """
        if not endpoint.available:
            return False
        endpoint.available = False
        logger.debug(f"Marked RPC server {endpoint.address} unavailable")
        return True

    def all_unavailable(self) -> bool:
        return not any(endpoint.available for endpoint in self.endpoints)
