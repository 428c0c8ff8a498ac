import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from durable_llama.entities.invocation_template import DEFAULT_GPU_LAYERS
from durable_llama.entities.liveness_monitor import DEFAULT_STALL_THRESHOLD
from durable_llama.entities.worker_endpoint import DEFAULT_RPC_PORT
from durable_llama.shared.reachability_prober import DEFAULT_PROBE_TIMEOUT


class Config(BaseModel):
    """Supervisor configuration.

    Attributes:
        executable: Path of the inference executable, also used as argument zero.
        default_rpc_port: Port assumed for RPC server addresses given without one.
        default_gpu_layers: Layers to offload when the command line has no -ngl.
        stall_threshold: Seconds without output before workers are probed and the process restarted.
        probe_timeout: Connect timeout in seconds for each RPC server probe.
        poll_timeout: Seconds to wait for output on each tick.
        tick_interval: Pause between control loop ticks in seconds.
        read_chunk_size: Maximum bytes read from the output pipe at once.
        terminate_timeout: Seconds to wait after SIGTERM before SIGKILL (None waits forever).
        log_level: Logging level name.
    """

    executable: str = Field("./llama-cli", description="Path of the inference executable")
    default_rpc_port: int = Field(DEFAULT_RPC_PORT, ge=1, le=65535, description="Port assumed for RPC addresses without one")
    default_gpu_layers: int = Field(DEFAULT_GPU_LAYERS, ge=0, description="Layers to offload when -ngl is not given")
    stall_threshold: float = Field(DEFAULT_STALL_THRESHOLD, gt=0, description="Seconds without output that count as a stall")
    probe_timeout: float = Field(DEFAULT_PROBE_TIMEOUT, gt=0, description="Connect timeout for RPC server probes")
    poll_timeout: float = Field(1.0, gt=0, description="Seconds to wait for output on each tick")
    tick_interval: float = Field(0.1, ge=0, description="Pause between control loop ticks")
    read_chunk_size: int = Field(4096, gt=0, description="Maximum bytes read from the output pipe at once")
    terminate_timeout: Optional[float] = Field(10.0, gt=0, description="Seconds to wait after SIGTERM before SIGKILL (null waits forever)")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("INFO", description="Logging level name")

    @classmethod
    def load(cls, config_path: str = "durable_llama.json") -> "Config":
        """Load and validate configuration from JSON file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)
