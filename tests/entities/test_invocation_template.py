import pytest
from pydantic import ValidationError

from durable_llama.entities.invocation_template import DEFAULT_GPU_LAYERS, InvocationTemplate
from durable_llama.shared.errors import ConfigurationError


class TestInvocationTemplate:
    """Test cases for capturing the original command line."""

    def test_extracts_rpc_addresses_in_order(self):
        template = InvocationTemplate.from_argv(["-m", "model.gguf", "--rpc", "a:1,b:2,c"])
        assert template.rpc_addresses == ("a:1", "b:2", "c")

    def test_extracts_ngl(self):
        template = InvocationTemplate.from_argv(["-ngl", "40", "--rpc", "a:1"])
        assert template.gpu_layers == 40

    def test_extracts_long_gpu_layers_flag(self):
        template = InvocationTemplate.from_argv(["--n-gpu-layers", "12", "--rpc", "a:1"])
        assert template.gpu_layers == 12

    def test_gpu_layers_default(self):
        template = InvocationTemplate.from_argv(["--rpc", "a:1"])
        assert template.gpu_layers == DEFAULT_GPU_LAYERS == 99

    def test_gpu_layers_configured_default(self):
        template = InvocationTemplate.from_argv(["--rpc", "a:1"], default_gpu_layers=20)
        assert template.gpu_layers == 20

    def test_first_gpu_layers_flag_wins(self):
        template = InvocationTemplate.from_argv(["-ngl", "10", "--n-gpu-layers", "30"])
        assert template.gpu_layers == 10

    def test_first_rpc_flag_wins(self):
        template = InvocationTemplate.from_argv(["--rpc", "a:1", "--rpc", "b:2"])
        assert template.rpc_addresses == ("a:1",)

    def test_trailing_gpu_layers_flag_is_ignored(self):
        template = InvocationTemplate.from_argv(["--rpc", "a:1", "-ngl"])
        assert template.gpu_layers == DEFAULT_GPU_LAYERS

    def test_trailing_rpc_flag_supplies_no_workers(self):
        template = InvocationTemplate.from_argv(["-m", "model.gguf", "--rpc"])
        assert template.rpc_addresses == ()

    def test_non_numeric_gpu_layers(self):
        with pytest.raises(ConfigurationError):
            InvocationTemplate.from_argv(["-ngl", "all", "--rpc", "a:1"])

    def test_passthrough_drops_managed_flags_and_values(self):
        template = InvocationTemplate.from_argv(
            ["-m", "model.gguf", "--rpc", "a:1", "-n", "128", "-ngl", "40", "--n-gpu-layers", "8", "--temp", "0.7"]
        )
        assert template.passthrough_arguments() == ["-m", "model.gguf", "-n", "128", "--temp", "0.7"]

    def test_passthrough_with_trailing_managed_flag(self):
        template = InvocationTemplate.from_argv(["-m", "model.gguf", "--n-gpu-layers"])
        assert template.passthrough_arguments() == ["-m", "model.gguf"]

    def test_template_is_immutable(self):
        template = InvocationTemplate.from_argv(["--rpc", "a:1"])
        with pytest.raises(ValidationError):
            template.gpu_layers = 5
