"""Email notification service for portage-maint."""

from typing import Callable

from portagemaint.errors import MaintenanceError


class MailNotifier:
    """Delivers a file as an email body through the system mail command."""

    def __init__(self, run_cmd: Callable, logger, mail_command: str = "mail"):
        self.run_cmd = run_cmd
        self.logger = logger
        self.mail_command = mail_command

    def send(self, address: str, subject: str, body_path: str) -> bool:
        if not address:
            self.logger.debug("No address configured, skipping mail '%s'", subject)
            return False

        try:
            result = self.run_cmd(
                [self.mail_command, "-s", subject, address],
                check=False,
                capture_output=True,
                input_path=body_path,
            )
        except MaintenanceError as exc:
            self.logger.warning("Could not send mail to %s: %s", address, exc)
            return False

        if result.returncode != 0:
            self.logger.warning(
                "Mail command exited with %s while sending to %s", result.returncode, address
            )
            return False

        self.logger.info("Sent '%s' to %s", subject, address)
        return True
