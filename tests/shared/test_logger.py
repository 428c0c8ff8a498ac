import logging

import pytest

from durable_llama.shared.logger import Logger


@pytest.fixture
def root_level():
    previous = logging.getLogger().level
    yield
    logging.getLogger().setLevel(previous)


class TestLogger:
    """Test cases for the logging helper."""

    def test_get_returns_named_logger(self):
        logger = Logger.get("durable_llama.use_cases.supervise_inference")
        assert logger.name == "durable_llama.use_cases.supervise_inference"
        assert logging.getLogger().handlers

    def test_set_level_accepts_lowercase(self, root_level):
        Logger.set_level("debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_set_level_accepts_config_names(self, root_level):
        Logger.set_level("WARNING")
        assert logging.getLogger().level == logging.WARNING
