import logging
from unittest.mock import MagicMock

from pdf_form.utils import configure_logging, format_file_size, get_logger, time_block


def test_format_file_size():
    assert format_file_size(500) == "500.0 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(5 * 1024 * 1024) == "5.0 MB"


def test_get_logger_is_idempotent():
    logger = get_logger("pdf_form.tests.sample")
    assert get_logger("pdf_form.tests.sample") is logger
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_sets_package_levels():
    logger = get_logger("pdf_form.tests.levels")
    configure_logging(logging.DEBUG)
    assert logger.level == logging.DEBUG
    configure_logging(logging.WARNING)
    assert logger.level == logging.WARNING


def test_time_block_logs_start_and_end():
    logger = MagicMock()
    with time_block(logger, "work"):
        pass
    assert logger.debug.call_count == 2
    assert logger.debug.call_args_list[0].args == ("Starting %s", "work")
