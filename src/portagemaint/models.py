"""Shared domain models for portage-maint."""

import os
from dataclasses import dataclass

from portagemaint.constants import LOG_SUFFIX, MAIL_SUFFIX


@dataclass(frozen=True)
class RunConfiguration:
    """Tunable parameters for one maintenance run, fixed before the pipeline starts."""

    sync_args: str = ""
    update_args: str = ""
    preserved_rebuild_args: str = ""
    depclean_args: str = ""
    revdep_rebuild_args: str = ""
    perl_cleaner_args: str = ""
    auto_abort: bool = True
    verbosity: int = 0
    nice: int = 0
    error_email: str = ""
    success_email: str = ""
    tmp_dir: str = "/tmp"
    debug: bool = False
    mail_command: str = "mail"


@dataclass(frozen=True)
class RunContext:
    """Working directory layout isolated per process."""

    run_id: str
    work_dir: str
    trace_log: str

    def log_path(self, phase_name: str) -> str:
        return os.path.join(self.work_dir, f"{phase_name}{LOG_SUFFIX}")

    def mail_path(self, phase_name: str) -> str:
        return os.path.join(self.work_dir, f"{phase_name}{MAIL_SUFFIX}")


@dataclass(frozen=True)
class Phase:
    """One step of the maintenance pipeline."""

    name: str
    program: str
    base_args: tuple
    args_key: str
    exit_code: int
    description: str
    check_emerging: bool = False
    check_news: bool = False
