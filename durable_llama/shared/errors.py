class DurableLlamaError(Exception):
    """Base class for supervisor errors."""


class ConfigurationError(DurableLlamaError):
    """Raised for invalid operator input, reported before any process is launched."""


class ProcessStartError(DurableLlamaError):
    """Raised when the inference executable could not be spawned."""

    def __init__(self, executable: str, cause: OSError):
        super().__init__(f"Failed to start {executable}: {cause}")
        self.executable = executable
        self.cause = cause
