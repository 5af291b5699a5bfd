"""Static values shared across portage-maint."""

import os

SUCCESS_EXIT_CODE = 0
ABORT_EXIT_CODE = 1
SYNC_EXIT_CODE = 2
UPDATE_EXIT_CODE = 3
DEPCLEAN_EXIT_CODE = 4
REVDEP_EXIT_CODE = 5

SYSTEM_CONFIG_PATH = "/etc/portage-maint.yml"
USER_CONFIG_PATH = os.path.join("~", ".portage-maint.yml")

WORK_DIR_PREFIX = "portage-maint"
TRACE_LOG_NAME = "trace.log"
LOG_SUFFIX = ".log"
MAIL_SUFFIX = ".mail"

PACKAGE_MANAGER_PROCESS = "emerge"

# Shell convention for a program that could not be executed.
COMMAND_NOT_RUN_STATUS = 127

DEFAULTS = {
    "sync_args": "",
    "update_args": "--update --deep --newuse --with-bdeps=y @world",
    "preserved_rebuild_args": "",
    "depclean_args": "",
    "revdep_rebuild_args": "",
    "perl_cleaner_args": "--all",
    "auto_abort": True,
    "verbosity": 0,
    "nice": 19,
    "error_email": "",
    "success_email": "",
    "tmp_dir": "/tmp",
    "debug": False,
    "mail_command": "mail",
}
