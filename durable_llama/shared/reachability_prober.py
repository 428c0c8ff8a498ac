import socket

from durable_llama.shared.logger import Logger

logger = Logger.get(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0


class ReachabilityProber:
    """
    Bounded-time TCP reachability check for RPC worker endpoints.
    Opens a connection, closes it straight away, and sends no payload.

    Host names are resolved once at startup with resolve(); probe() only takes
    numeric addresses so that a check never waits on DNS.
    """

    @staticmethod
    def resolve(host: str, port: int) -> str:
        """
        Resolve a worker host to the numeric address used for every later probe.

        Raises:
            OSError: If the name cannot be resolved
        """
        return socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)[0][4][0]

    @staticmethod
    def probe(host: str, port: int, timeout: float = DEFAULT_PROBE_TIMEOUT) -> bool:
        """
        Check whether a TCP connection to host:port can be established.

        A single connect attempt is made, so the call never takes longer than timeout.

        Args:
            host: Numeric IPv4 or IPv6 address of the worker
            port: The worker port
            timeout: Connect timeout in seconds

        Returns:
            True only if the handshake completed, False on any failure
        """
        if not 0 < port < 65536:
            logger.debug(f"Probe skipped for {host}:{port}: port out of range")
            return False
        try:
            family, socktype, proto, _, sockaddr = socket.getaddrinfo(
                host, port, type=socket.SOCK_STREAM, flags=socket.AI_NUMERICHOST
            )[0]
            with socket.socket(family, socktype, proto) as sock:
                sock.settimeout(timeout)
                sock.connect(sockaddr)
            logger.debug(f"Probe succeeded for {host}:{port}")
            return True
        except (OSError, UnicodeError) as e:
            logger.debug(f"Probe failed for {host}:{port}: {e}")
            return False
