from typing import List, Tuple

from pydantic import BaseModel, ConfigDict

from durable_llama.shared.errors import ConfigurationError

RPC_FLAG = "--rpc"
GPU_LAYER_FLAGS = ("-ngl", "--n-gpu-layers")
# Flags rebuilt on every restart; each one is followed by its value.
MANAGED_FLAGS = (RPC_FLAG,) + GPU_LAYER_FLAGS

DEFAULT_GPU_LAYERS = 99


class InvocationTemplate(BaseModel):
    """The supervisor's original command line, captured once at startup."""
    model_config = ConfigDict(frozen=True)

    arguments: Tuple[str, ...]  # original arguments, program name excluded
    rpc_addresses: Tuple[str, ...] = ()
    gpu_layers: int = DEFAULT_GPU_LAYERS

    @classmethod
    def from_argv(cls, arguments: List[str], default_gpu_layers: int = DEFAULT_GPU_LAYERS) -> "InvocationTemplate":
        """
        Capture the command line and pull out the values of the managed flags.

        Only the first --rpc and the first -ngl/--n-gpu-layers pair count. A managed
        flag in last position has no value and is ignored.

        Raises:
            ConfigurationError: If the layer count is not an integer
        """
        rpc_addresses: Tuple[str, ...] = ()
        gpu_layers = None
        for i in range(len(arguments) - 1):
            flag, value = arguments[i], arguments[i + 1]
            if flag == RPC_FLAG and not rpc_addresses:
                rpc_addresses = tuple(value.split(","))
            elif flag in GPU_LAYER_FLAGS and gpu_layers is None:
                try:
                    gpu_layers = int(value)
                except ValueError as e:
                    raise ConfigurationError(f"Invalid value for {flag}: '{value}'") from e

        return cls(
            arguments=tuple(arguments),
            rpc_addresses=rpc_addresses,
            gpu_layers=default_gpu_layers if gpu_layers is None else gpu_layers,
        )

    def passthrough_arguments(self) -> List[str]:
        """Original arguments with every managed flag and the token after it dropped."""
        passthrough = []
        skip_next = False
        for arg in self.arguments:
            if skip_next:
                skip_next = False
                continue
            if arg in MANAGED_FLAGS:
                skip_next = True
                continue
            passthrough.append(arg)
        return passthrough
