import logging

from hours.app.core.logging_setup import reset_logging, setup_logging


def test_setup_logging_is_idempotent():
    reset_logging()
    try:
        setup_logging("DEBUG")
        setup_logging("ERROR")
        logger = logging.getLogger("hours")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
    finally:
        reset_logging()


def test_unknown_level_falls_back_to_info():
    reset_logging()
    try:
        setup_logging("chatty")
        assert logging.getLogger("hours").level == logging.INFO
    finally:
        reset_logging()
