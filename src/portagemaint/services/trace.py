"""Append-only execution trace for a maintenance run."""

from datetime import datetime, timezone
from typing import Optional

from portagemaint.errors import MaintenanceError


class TraceLog:
    """Records every phase invocation and guard decision in ``trace.log``."""

    def __init__(self, trace_file: str, logger):
        self.trace_file = trace_file
        self.logger = logger

    def record(self, event: str, details: Optional[str] = None):
        line = f"{self._now()} {event}"
        if details:
            line = f"{line} {details}"
        try:
            with open(self.trace_file, "a", encoding="utf-8") as file_obj:
                file_obj.write(line + "\n")
        except OSError as exc:
            raise MaintenanceError(f"Could not write trace log '{self.trace_file}': {exc}") from exc
        self.logger.debug("Trace: %s", line)

    def phase_started(self, phase_name: str, args: str):
        self.record(phase_name, args or "<no args>")

    def guard_checked(self, guard_name: str, phase_name: str, triggered: bool):
        self.record(f"guard:{guard_name}", f"before={phase_name} triggered={str(triggered).lower()}")

    def finalize(self, status: str, exit_code: int):
        self.record("finished", f"status={status} exit_code={exit_code}")

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
