import logging

from signtrainer.logger import get_logger, setup_logging


def test_child_loggers_hang_off_package_logger() -> None:
    assert get_logger().name == "signtrainer"
    assert get_logger("session").name == "signtrainer.session"


def test_setup_logging_is_repeatable() -> None:
    logger = setup_logging(debug=True)
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert setup_logging().level == logging.INFO
