from typing import List, Sequence

from durable_llama.entities.invocation_template import InvocationTemplate, RPC_FLAG
from durable_llama.entities.worker_endpoint import WorkerEndpoint
from durable_llama.frameworks_drivers.worker_registry import WorkerRegistry

CPU_ONLY_GPU_LAYERS = 0


class CommandBuilder:
    """
    Rebuilds the inference command line from the captured invocation and the
    workers that are still available.
    """

    def __init__(self, executable: str, template: InvocationTemplate, registry: WorkerRegistry):
        self.executable = executable
        self.template = template
        self.registry = registry

    def build(self, template: InvocationTemplate, available_endpoints: Sequence[WorkerEndpoint], gpu_layers: int) -> List[str]:
        """
        Produce the argument list for the next child process.

        Args:
            template: The captured original invocation
            available_endpoints: Workers to offload to, in configuration order
            gpu_layers: Layer count used when at least one worker is available

        Returns:
            Argument list with the executable as argument zero. With no workers
            left the command runs CPU-only (-ngl 0, no --rpc).
        """
        args = [self.executable]
        args.extend(template.passthrough_arguments())

        if available_endpoints:
            args.extend([RPC_FLAG, ",".join(endpoint.address for endpoint in available_endpoints)])
            args.extend(["-ngl", str(gpu_layers)])
        else:
            args.extend(["-ngl", str(CPU_ONLY_GPU_LAYERS)])
        return args

    def build_current(self) -> List[str]:
        """Build from the bound template and the registry's current availability."""
        return self.build(self.template, self.registry.available_endpoints(), self.template.gpu_layers)
