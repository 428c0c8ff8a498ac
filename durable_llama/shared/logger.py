import logging
import sys


class Logger:
    """Logging setup shared by every supervisor module."""

    FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def get(name: str) -> logging.Logger:
        """
        Return the logger for a module, configuring the root logger on first use.

        Records are written to stderr; stdout carries only the inference output.
        """
        if not logging.getLogger().hasHandlers():
            logging.basicConfig(level=logging.INFO, format=Logger.FORMAT, stream=sys.stderr)
        return logging.getLogger(name)

    @staticmethod
    def set_level(level: str) -> None:
        """Apply the configured level name, e.g. "DEBUG", to the root logger."""
        logging.getLogger().setLevel(level.upper())
