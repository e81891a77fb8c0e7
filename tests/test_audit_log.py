"""Tests for the removal log."""

from pathlib import Path

from binclean.core.audit_log import RemovalLog


class TestRemovalLog:
    """Tests for RemovalLog."""

    def test_creates_parent_directories(self, tmp_path):
        log_path = tmp_path / "state" / "binclean" / "removed.log"
        log = RemovalLog(log_path)

        log.start_run()

        assert log_path.exists()

    def test_run_separator_then_paths(self, tmp_path):
        log_path = tmp_path / "removed.log"
        log = RemovalLog(log_path)

        log.start_run()
        log.record(Path("/src/proj/bin/app.exe"))
        log.record(Path("/src/proj/obj/x.o"))

        lines = log_path.read_text().splitlines()
        assert lines[0].startswith("===== binclean run ")
        assert lines[0].endswith(" =====")
        assert lines[1:] == [str(Path("/src/proj/bin/app.exe")), str(Path("/src/proj/obj/x.o"))]

    def test_appends_across_runs(self, tmp_path):
        """Earlier runs are never truncated."""
        log_path = tmp_path / "removed.log"

        first = RemovalLog(log_path)
        first.start_run()
        first.record(Path("a"))
        second = RemovalLog(log_path)
        second.start_run()
        second.record(Path("b"))

        lines = log_path.read_text().splitlines()
        assert len(lines) == 4
        assert sum(line.startswith("=====") for line in lines) == 2
        assert lines[1] == "a"
        assert lines[3] == "b"

    def test_unwritable_log_disables_itself(self, tmp_path, caplog):
        """A log path that cannot be written warns once and stops trying."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        log = RemovalLog(blocker / "removed.log")

        log.start_run()
        log.record(Path("a"))
        log.record(Path("b"))

        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "Removal log disabled" in warnings[0].getMessage()
