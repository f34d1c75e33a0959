# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-12
# Description: test_logging_utils.py
# -----------------------------------------------------------------------------
import logging

from utility import logging_utils
from utility.logging_utils import BASE_LOGGER_NAME, get_class_logger


class _Widget:
    pass


class _FileWidget:
    pass


def test_class_logger_name_includes_module_and_class():
    logger = get_class_logger(_Widget)
    assert logger.name == f"{BASE_LOGGER_NAME}.{__name__}._Widget"


def test_repeat_calls_do_not_stack_handlers():
    first = get_class_logger(_Widget)
    handlers = len(first.handlers)

    second = get_class_logger(_Widget)

    assert second is first
    assert len(second.handlers) == handlers


def test_class_logger_is_the_only_factory():
    assert not hasattr(logging_utils, "get_logger")


def test_file_logging_is_opt_in(tmp_path, monkeypatch):
    log_file = tmp_path / "nested" / "vnv.log"
    monkeypatch.setenv("VNV_LOG_TO_FILE", "true")
    monkeypatch.setenv("VNV_LOG_FILE", str(log_file))
    monkeypatch.setenv("VNV_LOG_LEVEL", "DEBUG")

    logger = get_class_logger(_FileWidget)
    try:
        logger.debug("written to file")
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert "written to file" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
