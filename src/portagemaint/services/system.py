"""Host probes used by the safety guards and process setup."""

import os
from typing import Callable

from portagemaint.errors import MaintenanceError


class ProcessInspector:
    """Reports whether a named process is currently running."""

    def __init__(self, run_cmd: Callable):
        self.run_cmd = run_cmd

    def is_running(self, name: str) -> bool:
        result = self.run_cmd(["pgrep", "-x", name], check=False, capture_output=True)
        return result.returncode == 0


class NewsSource:
    """Reads unread Portage news items through ``eselect news``."""

    def __init__(self, run_cmd: Callable):
        self.run_cmd = run_cmd

    def unread_count(self) -> int:
        result = self.run_cmd(["eselect", "news", "count", "new"], capture_output=True)
        output = (result.stdout or "").strip()
        try:
            return int(output.splitlines()[-1]) if output else 0
        except ValueError as exc:
            raise MaintenanceError(f"Unexpected output from 'eselect news count': {output!r}") from exc

    def listing(self) -> str:
        result = self.run_cmd(["eselect", "news", "list"], check=False, capture_output=True)
        return (result.stdout or "").strip()


class PriorityAdjuster:
    """Applies a scheduling priority delta to the current process."""

    def __init__(self, logger, nice_func: Callable = os.nice):
        self.logger = logger
        self.nice_func = nice_func

    def adjust(self, delta: int):
        if not delta:
            return
        try:
            niceness = self.nice_func(delta)
        except OSError as exc:
            self.logger.warning("Could not adjust process priority by %s: %s", delta, exc)
            return
        self.logger.debug("Process niceness is now %s", niceness)
