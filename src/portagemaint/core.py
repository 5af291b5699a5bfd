import logging
import shlex
import socket
from typing import Iterable, List, Optional

from rich.console import Console

from .constants import (
    ABORT_EXIT_CODE,
    COMMAND_NOT_RUN_STATUS,
    PACKAGE_MANAGER_PROCESS,
    SUCCESS_EXIT_CODE,
)
from .errors import GuardAbortError, MaintenanceError, PhaseFailedError
from .errors_catalog import actionable_error
from .models import Phase, RunConfiguration, RunContext
from .phases import PHASES, UPDATE
from .services.command_runner import CommandRunner
from .services.notifier import MailNotifier
from .services.system import NewsSource, PriorityAdjuster, ProcessInspector
from .services.trace import TraceLog
from .services.workspace import Workspace

console = Console()
logger = logging.getLogger("portagemaint")


class MaintenanceRunner:
    """Runs the maintenance phases in order and reports the outcome by mail."""

    def __init__(
        self,
        config: RunConfiguration,
        phases: Iterable[Phase] = PHASES,
        command_runner: Optional[CommandRunner] = None,
        process_inspector: Optional[ProcessInspector] = None,
        news_source: Optional[NewsSource] = None,
        notifier: Optional[MailNotifier] = None,
        priority_adjuster: Optional[PriorityAdjuster] = None,
        workspace: Optional[Workspace] = None,
        hostname: Optional[str] = None,
    ):
        self.config = config
        self.phases = tuple(phases)
        self.hostname = hostname or socket.gethostname()

        self.command_runner = command_runner or CommandRunner(logger=logger)
        self.process_inspector = process_inspector or ProcessInspector(self._run_cmd)
        self.news_source = news_source or NewsSource(self._run_cmd)
        self.notifier = notifier or MailNotifier(
            self._run_cmd,
            logger=logger,
            mail_command=config.mail_command,
        )
        self.priority_adjuster = priority_adjuster or PriorityAdjuster(logger=logger)
        self.workspace = workspace or Workspace(
            base_dir=config.tmp_dir,
            logger=logger,
            keep=config.debug,
        )

        self.context: Optional[RunContext] = None
        self.trace: Optional[TraceLog] = None
        self.current_phase: Optional[str] = None

    def _run_cmd(self, cmd: List[str], **kwargs):
        return self.command_runner.run(cmd, **kwargs)

    def build_command(self, phase: Phase) -> List[str]:
        raw_args = getattr(self.config, phase.args_key)
        try:
            extra_args = shlex.split(raw_args or "")
        except ValueError as exc:
            raise MaintenanceError(f"Invalid arguments for {phase.name}: {raw_args!r} ({exc})") from exc
        return [phase.program, *phase.base_args, *extra_args]

    def check_emerging(self, phase: Phase):
        if not self.config.auto_abort:
            return

        running = self.process_inspector.is_running(PACKAGE_MANAGER_PROCESS)
        self.trace.guard_checked("emerging", phase.name, running)
        if running:
            raise GuardAbortError(
                actionable_error("emerge_running", phase=phase.name),
                guard="emerging",
                phase=phase.name,
            )

    def check_news(self, phase: Phase):
        if not self.config.auto_abort:
            return

        count = self.news_source.unread_count()
        self.trace.guard_checked("news", phase.name, count > 0)
        if count > 0:
            raise GuardAbortError(
                actionable_error("unread_news", phase=phase.name, count=count),
                guard="news",
                phase=phase.name,
                details=self.news_source.listing(),
            )

    def run_phase(self, phase: Phase):
        self.current_phase = phase.name

        if phase.check_emerging:
            self.check_emerging(phase)
        if phase.check_news:
            self.check_news(phase)

        cmd = self.build_command(phase)
        log_path = self.context.log_path(phase.name)
        self.workspace.remove_stale(log_path)
        self.trace.phase_started(phase.name, " ".join(cmd[1:]))

        logger.info("Running %s: %s", phase.name, " ".join(cmd))
        try:
            returncode = self._run_cmd(cmd, check=False, output_path=log_path).returncode
        except MaintenanceError as exc:
            returncode = COMMAND_NOT_RUN_STATUS
            self._append_log(log_path, str(exc))

        if returncode != 0:
            raise PhaseFailedError(
                actionable_error(phase.description, returncode=returncode),
                phase=phase.name,
                exit_code=phase.exit_code,
                log_path=log_path,
                returncode=returncode,
            )

        logger.info("Phase %s completed.", phase.name)
        self.current_phase = None

    @staticmethod
    def _append_log(log_path: str, message: str):
        try:
            with open(log_path, "a", encoding="utf-8") as file_obj:
                file_obj.write(message + "\n")
        except OSError as exc:
            logger.warning("Could not write %s: %s", log_path, exc)

    @staticmethod
    def _read_log(log_path: str) -> str:
        try:
            with open(log_path, "r", encoding="utf-8", errors="replace") as file_obj:
                return file_obj.read()
        except OSError as exc:
            logger.warning("Could not read %s: %s", log_path, exc)
            return f"(log unavailable: {exc})"

    def write_mail_body(self, name: str, message: str, attachment: str = "") -> str:
        mail_path = self.context.mail_path(name)
        try:
            self.workspace.remove_stale(mail_path)
            with open(mail_path, "w", encoding="utf-8") as file_obj:
                file_obj.write(message + "\n")
                if attachment:
                    file_obj.write("\n" + attachment)
                    if not attachment.endswith("\n"):
                        file_obj.write("\n")
        except OSError as exc:
            raise MaintenanceError(f"Could not write mail body '{mail_path}': {exc}") from exc
        return mail_path

    def _subject(self, summary: str) -> str:
        return f"[portage-maint] {self.hostname}: {summary}"

    def _diagnostic(self, message: str):
        if self.config.verbosity >= 1:
            console.print(f"[bold red]portage-maint:[/bold red] {message}", highlight=False)

    def _notify(self, address: str, summary: str, name: str, message: str, attachment: str = ""):
        try:
            mail_path = self.write_mail_body(name, message, attachment)
        except MaintenanceError as exc:
            logger.warning("Notification skipped: %s", exc)
            return
        self.notifier.send(address, self._subject(summary), mail_path)

    def report_failure(self, exc: PhaseFailedError):
        self._notify(
            self.config.error_email,
            f"{exc.phase} failed (exit {exc.exit_code})",
            exc.phase,
            str(exc),
            self._read_log(exc.log_path),
        )
        self._diagnostic(f"{exc.phase} failed, see {exc.log_path}")

    def report_abort(self, exc: GuardAbortError):
        self._notify(
            self.config.error_email,
            f"aborted before {exc.phase} ({exc.guard} guard)",
            f"{exc.phase}-abort",
            str(exc),
            exc.details,
        )
        self._diagnostic(f"aborted before {exc.phase}: {exc.guard} guard triggered")

    def report_error(self, message: str):
        phase_name = self.current_phase or "run"
        self._notify(
            self.config.error_email,
            f"aborted during {phase_name} (error)",
            f"{phase_name}-abort",
            message,
        )
        self._diagnostic(message)

    def report_success(self):
        self._notify(
            self.config.success_email,
            "maintenance completed",
            "success",
            actionable_error("run_succeeded", host=self.hostname),
            self._read_log(self.context.log_path(UPDATE.name)),
        )

    def _execute(self) -> int:
        exit_code = ABORT_EXIT_CODE
        status = "failed"

        try:
            self.priority_adjuster.adjust(self.config.nice)
            self.trace.record("start", f"run_id={self.context.run_id} host={self.hostname}")

            for phase in self.phases:
                self.run_phase(phase)

            self.report_success()
            status = "success"
            exit_code = SUCCESS_EXIT_CODE
            return exit_code

        except GuardAbortError as exc:
            logger.info(str(exc))
            self.report_abort(exc)
            status = "aborted"
            exit_code = exc.exit_code
            return exit_code
        except PhaseFailedError as exc:
            logger.info(str(exc))
            self.report_failure(exc)
            exit_code = exc.exit_code
            return exit_code
        except KeyboardInterrupt:
            logger.warning("Maintenance interrupted during %s", self.current_phase or "setup")
            self._diagnostic("interrupted")
            status = "aborted"
            exit_code = ABORT_EXIT_CODE
            return exit_code
        except MaintenanceError as exc:
            logger.error(str(exc))
            self.report_error(str(exc))
            exit_code = exc.exit_code
            return exit_code
        except Exception as exc:
            logger.exception("Unexpected error")
            self.report_error(f"Unexpected error: {exc}")
            exit_code = ABORT_EXIT_CODE
            return exit_code
        finally:
            try:
                self.trace.finalize(status, exit_code)
            except MaintenanceError as exc:
                logger.warning(str(exc))

    def run(self) -> int:
        try:
            with self.workspace as context:
                self.context = context
                self.trace = TraceLog(context.trace_log, logger=logger)
                return self._execute()
        except KeyboardInterrupt:
            logger.warning("Maintenance interrupted before the pipeline started")
            return ABORT_EXIT_CODE
        except MaintenanceError as exc:
            logger.error(str(exc))
            self._diagnostic(str(exc))
            return exc.exit_code
