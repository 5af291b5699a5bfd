"""Domain errors for portage-maint."""

from portagemaint.constants import ABORT_EXIT_CODE


class MaintenanceError(RuntimeError):
    """Raised when the maintenance run cannot continue safely."""

    exit_code = ABORT_EXIT_CODE


class ConfigError(MaintenanceError):
    """Raised for unreadable or invalid configuration sources."""


class GuardAbortError(MaintenanceError):
    """Raised when a safety guard stops the run before a phase starts."""

    def __init__(self, message: str, guard: str, phase: str, details: str = ""):
        super().__init__(message)
        self.guard = guard
        self.phase = phase
        self.details = details


class PhaseFailedError(MaintenanceError):
    """Raised when a phase command exits with a non-zero status."""

    def __init__(self, message: str, phase: str, exit_code: int, log_path: str, returncode: int):
        super().__init__(message)
        self.phase = phase
        self.exit_code = exit_code
        self.log_path = log_path
        self.returncode = returncode
