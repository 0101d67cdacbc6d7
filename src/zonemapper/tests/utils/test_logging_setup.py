import logging

from zonemapper.utils.logging import setup_logging


class TestSetupLogging:
    """Logger tree configuration used by the CLI."""

    def test_file_handler(self, tmp_path):
        logger, summary = setup_logging(log_dir=str(tmp_path / "logs"), console=False, level="DEBUG")

        assert logger.name == "zonemapper"
        assert summary.name == "zonemapper.summary"
        assert logger.propagate is False
        log_files = list((tmp_path / "logs").glob("zonemapper_*.log"))
        assert len(log_files) == 1

        summary.info("run finished")
        for handler in summary.handlers:
            handler.flush()
        assert "SUMMARY - run finished" in log_files[0].read_text(encoding="utf-8")

    def test_console_only(self):
        logger, summary = setup_logging(log_dir=None, console=True, level="WARNING")
        assert logger.level == logging.WARNING
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_quiet_console(self):
        logger, summary = setup_logging(log_dir=None, console=True, quiet_console=True)
        assert logger.handlers == []
        assert [h.level for h in summary.handlers] == [logging.ERROR]

    def test_repeat_calls_do_not_stack_summary_handlers(self):
        setup_logging(log_dir=None, console=True)
        _, summary = setup_logging(log_dir=None, console=True)
        assert len(summary.handlers) == 1
