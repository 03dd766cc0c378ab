"""Logging configuration test cases."""
from loguru import logger

from dade.config import settings
from dade.logging.logger import LogConfig, get_logger


def test_file_sinks_created(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    try:
        LogConfig.setup_logging(level="DEBUG", to_file=True)
        get_logger("test", trace_id="abc123").info("hello")
        logger.complete()
        assert any((tmp_path / "logs").iterdir())
    finally:
        logger.remove()


def test_get_logger_binds_trace_id():
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        get_logger("unit_of_work", trace_id="feedbeef").debug("bound")
        get_logger().debug("unbound")
    finally:
        logger.remove(sink_id)

    assert records[0]["extra"]["trace_id"] == "feedbeef"
    assert records[0]["extra"]["name"] == "unit_of_work"
    assert records[1]["extra"]["trace_id"] == "unknown"
