import os
import sys
from typing import BinaryIO, List, Optional

from pydantic import ValidationError

from durable_llama.entities.invocation_template import InvocationTemplate
from durable_llama.entities.liveness_monitor import LivenessMonitor
from durable_llama.frameworks_drivers.config import Config
from durable_llama.frameworks_drivers.process_supervisor import ProcessSupervisor
from durable_llama.frameworks_drivers.worker_registry import WorkerRegistry
from durable_llama.shared.errors import ConfigurationError
from durable_llama.shared.logger import Logger
from durable_llama.shared.termination import TerminationToken
from durable_llama.use_cases.build_command import CommandBuilder
from durable_llama.use_cases.recover_from_stall import RecoverFromStall
from durable_llama.use_cases.supervise_inference import SuperviseInference

logger = Logger.get(__name__)

CONFIG_PATH_ENV = "DURABLE_LLAMA_CONFIG"
EXECUTABLE_ENV = "DURABLE_LLAMA_EXECUTABLE"


def usage(prog: str) -> str:
    return f"Usage: {prog} [llama.cpp options] --rpc server1:port1,server2:port2,..."


def load_config() -> Config:
    """Load configuration from $DURABLE_LLAMA_CONFIG if set, then apply environment overrides."""
    config_path = os.environ.get(CONFIG_PATH_ENV)
    try:
        config = Config.load(config_path) if config_path else Config()
    # Unreadable paths are OSError; bad JSON or encoding is ValueError.
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    # Override executable if set in environment
    if EXECUTABLE_ENV in os.environ:
        config.executable = os.environ[EXECUTABLE_ENV]
    return config


def build_supervision(
    arguments: List[str],
    config: Config,
    termination: TerminationToken,
    output: Optional[BinaryIO] = None,
) -> SuperviseInference:
    """
    Wire the registry, command builder, supervisor, stall recovery and control loop.

    All components share the same registry and monitor so that a worker removed
    during stall recovery is left out of every later restart.

    Raises:
        ConfigurationError: If no RPC servers were supplied or an address is malformed or unresolvable
    """
    template = InvocationTemplate.from_argv(arguments, config.default_gpu_layers)
    if not template.rpc_addresses:
        raise ConfigurationError("No RPC servers supplied")
    registry = WorkerRegistry.from_addresses(template.rpc_addresses, config.default_rpc_port)
    registry.resolve_addresses()

    monitor = LivenessMonitor(config.stall_threshold)
    command_builder = CommandBuilder(config.executable, template, registry)
    supervisor = ProcessSupervisor(
        command_builder,
        monitor,
        output=output,
        poll_timeout=config.poll_timeout,
        read_chunk_size=config.read_chunk_size,
        terminate_timeout=config.terminate_timeout,
    )
    stall_recovery = RecoverFromStall(registry, supervisor, monitor, probe_timeout=config.probe_timeout)
    return SuperviseInference(supervisor, monitor, stall_recovery, termination, tick_interval=config.tick_interval)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    prog, arguments = argv[0], argv[1:]

    if arguments in (["-h"], ["--help"]):
        print(usage(prog))
        return 0

    termination = TerminationToken()
    try:
        config = load_config()
        Logger.set_level(config.log_level)
        supervision = build_supervision(arguments, config, termination)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(usage(prog), file=sys.stderr)
        return 1

    logger.info("Starting Durable Llama supervisor...")
    termination.install()
    try:
        return supervision.execute()
    finally:
        termination.restore()
