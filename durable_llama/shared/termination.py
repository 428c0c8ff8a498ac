import signal
import threading
from typing import Any, Dict

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TerminationToken:
    """
    Single cancellation flag shared between signal handlers and the control loop.

    Handlers only set the flag; the control loop reads it once per tick.
    """

    def __init__(self):
        self._event = threading.Event()
        self._previous_handlers: Dict[int, Any] = {}

    def request(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def _handle_signal(self, signum, frame) -> None:
        # Only flips the flag; logging from here could re-enter a stderr write.
        self.request()

    def install(self) -> None:
        """Route SIGINT and SIGTERM to this token, remembering the previous handlers."""
        for signum in HANDLED_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def restore(self) -> None:
        """Reinstate the handlers that were active before install()."""
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
