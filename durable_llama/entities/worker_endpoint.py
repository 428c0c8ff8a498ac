from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from durable_llama.shared.errors import ConfigurationError

DEFAULT_RPC_PORT = 50053


class WorkerEndpoint(BaseModel):
    """Represents one remote llama.cpp rpc-server worker."""
    address: str  # host:port or bare host exactly as supplied by the operator
    host: str = Field(min_length=1)
    port: int = Field(DEFAULT_RPC_PORT, ge=1, le=65535)
    ip: Optional[str] = None  # numeric address resolved at startup
    available: bool = True  # only ever cleared, never set back within a run

    @classmethod
    def parse(cls, address: str, default_port: int = DEFAULT_RPC_PORT) -> "WorkerEndpoint":
        """
        Parse an operator-supplied worker address.

        Args:
            address: "host:port" or a bare "host"
            default_port: Port used when the address carries none

        Returns:
            A WorkerEndpoint flagged available

        Raises:
            ConfigurationError: If the host is empty or the port is not a valid number
        """
        host, sep, port_text = address.rpartition(":")
        if not sep:
            host, port = address, default_port
        else:
            if not port_text.isdecimal():
                raise ConfigurationError(f"Invalid port in RPC server address '{address}'")
            port = int(port_text)

        try:
            return cls(address=address, host=host, port=port)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid RPC server address '{address}': {e.errors()[0]['msg']}") from e

    @property
    def connect_host(self) -> str:
        """Address to probe: the resolved IP when known, otherwise the host as given."""
        return self.ip or self.host
