"""Per-run working directory management for portage-maint."""

import logging
import os
import shutil
import signal

from portagemaint.constants import TRACE_LOG_NAME, WORK_DIR_PREFIX
from portagemaint.errors import MaintenanceError
from portagemaint.models import RunContext


class Workspace:
    """Owns the run's working directory and guarantees a single cleanup.

    Use it as a context manager. Termination signals received inside the
    ``with`` block are turned into ``KeyboardInterrupt`` so the normal exit
    path runs and the directory is released exactly once.
    """

    HANDLED_SIGNALS = ("SIGTERM", "SIGHUP", "SIGINT")

    def __init__(self, base_dir: str, logger: logging.Logger, keep: bool = False, pid=None):
        self.base_dir = base_dir
        self.logger = logger
        self.keep = keep
        self.pid = os.getpid() if pid is None else pid
        self.context = self.build_context()
        self._released = False
        self._previous_handlers = {}

    def build_context(self) -> RunContext:
        run_id = str(self.pid)
        work_dir = os.path.join(self.base_dir, f"{WORK_DIR_PREFIX}.{run_id}")
        return RunContext(
            run_id=run_id,
            work_dir=work_dir,
            trace_log=os.path.join(work_dir, TRACE_LOG_NAME),
        )

    def create(self) -> RunContext:
        try:
            os.makedirs(self.context.work_dir, mode=0o700, exist_ok=True)
        except OSError as exc:
            raise MaintenanceError(
                f"Could not create working directory {self.context.work_dir}: {exc}"
            ) from exc
        self.logger.debug("Working directory: %s", self.context.work_dir)
        return self.context

    def remove_stale(self, path: str):
        if not os.path.exists(path):
            return
        try:
            os.remove(path)
        except OSError as exc:
            raise MaintenanceError(f"Could not remove stale file {path}: {exc}") from exc
        self.logger.debug("Removed stale file: %s", path)

    def release(self):
        if self._released:
            return
        self._released = True

        if self.keep:
            self.logger.info("Debug mode: keeping working directory %s", self.context.work_dir)
            return

        if os.path.exists(self.context.work_dir):
            try:
                shutil.rmtree(self.context.work_dir)
                self.logger.debug("Removed directory: %s", self.context.work_dir)
            except OSError as exc:
                self.logger.warning("Could not remove %s: %s", self.context.work_dir, exc)

    def _handle_signal(self, signum, _frame):
        raise KeyboardInterrupt(f"Received signal {signum}")

    def _install_signal_handlers(self):
        for name in self.HANDLED_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            try:
                self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)
            except ValueError:
                # Only the main thread may install handlers.
                continue

    def _restore_signal_handlers(self):
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers = {}

    def __enter__(self) -> RunContext:
        self._install_signal_handlers()
        try:
            return self.create()
        except BaseException:
            self._restore_signal_handlers()
            raise

    def __exit__(self, exc_type, exc, tb):
        try:
            self.release()
        finally:
            self._restore_signal_handlers()
        return False
