import pytest

from durable_llama.entities.worker_endpoint import DEFAULT_RPC_PORT, WorkerEndpoint
from durable_llama.shared.errors import ConfigurationError


def test_parse_host_and_port():
    endpoint = WorkerEndpoint.parse("10.0.0.1:50053")
    assert endpoint.address == "10.0.0.1:50053"
    assert endpoint.host == "10.0.0.1"
    assert endpoint.port == 50053
    assert endpoint.available is True


def test_parse_bare_host_uses_default_port():
    endpoint = WorkerEndpoint.parse("raspberrypi.local")
    assert endpoint.host == "raspberrypi.local"
    assert endpoint.port == DEFAULT_RPC_PORT == 50053
    assert endpoint.address == "raspberrypi.local"


def test_parse_bare_host_with_custom_default_port():
    endpoint = WorkerEndpoint.parse("192.168.1.20", default_port=50052)
    assert endpoint.port == 50052


def test_parse_keeps_original_address_text():
    endpoint = WorkerEndpoint.parse("worker-1:7000")
    assert endpoint.address == "worker-1:7000"
    assert endpoint.host == "worker-1"
    assert endpoint.port == 7000


@pytest.mark.parametrize("address", ["10.0.0.1:abc", "10.0.0.1:", "10.0.0.1:50o53", "10.0.0.1:-5"])
def test_parse_non_numeric_port(address):
    with pytest.raises(ConfigurationError):
        WorkerEndpoint.parse(address)


@pytest.mark.parametrize("address", ["10.0.0.1:0", "10.0.0.1:70000"])
def test_parse_out_of_range_port(address):
    with pytest.raises(ConfigurationError):
        WorkerEndpoint.parse(address)


@pytest.mark.parametrize("address", ["", ":50052"])
def test_parse_empty_host(address):
    with pytest.raises(ConfigurationError):
        WorkerEndpoint.parse(address)
