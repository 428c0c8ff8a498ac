from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Optional


@dataclass
class ChildProcess:
    """The supervised inference process and the read end of its output pipe."""

    process: subprocess.Popen | None = None
    read_fd: Optional[int] = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process is not None else None

    def close_pipe(self) -> None:
        """Close the read end of the output pipe if it is still open."""
        if self.read_fd is not None:
            os.close(self.read_fd)
            self.read_fd = None
