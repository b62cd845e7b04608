"""
Tests for logger functionality.
"""

import pytest
from jobly.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["queries_executed"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context is appended as JSON."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Message with context", handle="c1", count=5)

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert 'Context: {"handle": "c1", "count": 5}' in log_content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_query()
        logger.record_query(2)
        logger.record_operation("company", "create")
        logger.record_operation("company", "create")
        logger.record_operation("job", "list")
        logger.record_failure("job", "NotFoundError")

        metrics = logger.get_metrics()

        assert metrics["queries_executed"] == 3
        assert metrics["operations"]["company"] == {"create": 2}
        assert metrics["operations"]["job"] == {"list": 1, "failed": 1}
        assert metrics["errors_by_type"]["NotFoundError"] == 1

    def test_get_metrics_is_a_snapshot(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_operation("company", "get")

        snapshot = logger.get_metrics()
        snapshot["operations"]["company"]["get"] = 99

        assert logger.metrics["operations"]["company"]["get"] == 1

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_operation("company", "get")
        logger.record_failure("company", "DuplicateError")

        logger.log_metrics_summary()

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "company: failed=1, get=1" in log_content
        assert "DuplicateError: 1" in log_content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("jobly_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_query()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2.metrics["queries_executed"] == 0

    def test_default_log_dir_from_environment(self, tmp_path):
        """conftest points JOBLY_LOG_DIR at tmp_path/logs."""
        get_logger(enable_console=False).info("hello")
        assert list((tmp_path / "logs").glob("jobly_*.log"))

    def test_recreating_logger_closes_previous_file_handler(self, tmp_path):
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        file_handler = logger1.logger.handlers[0]

        reset_logger()
        get_logger(log_dir=tmp_path, enable_console=False)

        assert file_handler.stream is None or file_handler.stream.closed
        assert file_handler not in logger1.logger.handlers
