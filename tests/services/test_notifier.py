import subprocess

from portagemaint.errors import MaintenanceError
from portagemaint.services.notifier import MailNotifier


class DummyLogger:
    def __init__(self):
        self.warnings = []

    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *args, **_kwargs):
        self.warnings.append(args)


def test_notifier_pipes_body_into_mail_command(tmp_path):
    body = tmp_path / "sync.mail"
    body.write_text("sync failed\n", encoding="utf-8")
    calls = []

    def run_cmd(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    notifier = MailNotifier(run_cmd, logger=DummyLogger(), mail_command="mailx")
    sent = notifier.send("root@localhost", "sync failed", str(body))

    assert sent is True
    assert calls[0][0] == ["mailx", "-s", "sync failed", "root@localhost"]
    assert calls[0][1]["input_path"] == str(body)


def test_notifier_is_noop_without_address(tmp_path):
    calls = []

    notifier = MailNotifier(lambda cmd, **kwargs: calls.append(cmd), logger=DummyLogger())

    assert notifier.send("", "subject", str(tmp_path / "body")) is False
    assert calls == []


def test_notifier_logs_mail_command_failures(tmp_path):
    logger = DummyLogger()

    def run_cmd(cmd, **_kwargs):
        raise MaintenanceError("Required command not found: mail")

    notifier = MailNotifier(run_cmd, logger=logger)

    assert notifier.send("root@localhost", "subject", str(tmp_path / "body")) is False
    assert logger.warnings


def test_notifier_logs_non_zero_mail_status(tmp_path):
    logger = DummyLogger()

    def run_cmd(cmd, **_kwargs):
        return subprocess.CompletedProcess(cmd, 75, stdout="", stderr="queue full")

    notifier = MailNotifier(run_cmd, logger=logger)

    assert notifier.send("root@localhost", "subject", str(tmp_path / "body")) is False
    assert logger.warnings
