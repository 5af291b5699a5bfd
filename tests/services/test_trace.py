import pytest

from portagemaint.errors import MaintenanceError
from portagemaint.services.trace import TraceLog


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


def test_trace_log_appends_phase_records(tmp_path):
    trace_file = tmp_path / "trace.log"
    trace = TraceLog(str(trace_file), logger=DummyLogger())

    trace.phase_started("sync", "--sync")
    trace.guard_checked("news", "update", False)
    trace.phase_started("revdep-rebuild", "")
    trace.finalize("failed", 5)

    lines = trace_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    assert lines[0].endswith(" sync --sync")
    assert lines[1].endswith(" guard:news before=update triggered=false")
    assert lines[2].endswith(" revdep-rebuild <no args>")
    assert lines[3].endswith(" finished status=failed exit_code=5")


def test_trace_log_reports_unwritable_file(tmp_path):
    trace = TraceLog(str(tmp_path / "missing" / "trace.log"), logger=DummyLogger())

    with pytest.raises(MaintenanceError, match="Could not write trace log"):
        trace.record("start")
