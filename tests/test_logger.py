# File: tests/test_logger.py
import logging

import pytest

from sitesweep.logger import LOGGER_NAME, configure, get_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        handler.close()
    configure()


def test_child_loggers_write_to_log_file(tmp_path):
    log_file = tmp_path / "sitesweep.log"
    configure(level="DEBUG", log_file=log_file, log_format="%(name)s:%(levelname)s:%(message)s")

    get_logger("crawler").debug("batch %d done", 2)
    get_logger().info("root message")

    assert log_file.read_text(encoding="utf-8").splitlines() == [
        "SiteSweep.crawler:DEBUG:batch 2 done",
        "SiteSweep:INFO:root message",
    ]


def test_configure_replaces_handlers(tmp_path):
    configure(log_file=tmp_path / "a.log")
    lg = configure(level="WARNING")

    assert len(lg.handlers) == 1
    assert lg.level == logging.WARNING
    assert lg.propagate is False
