import json
import logging

from debt_calc.logging_config import LOGGER_NAME, JSONFormatter, PackageStreamHandler, configure_logging


def test_configure_twice_keeps_one_package_handler():
    logger = logging.getLogger(LOGGER_NAME)
    other = logging.NullHandler()
    logger.addHandler(other)

    configure_logging("INFO")
    configure_logging("DEBUG", json_output=True)

    package_handlers = [h for h in logger.handlers if isinstance(h, PackageStreamHandler)]
    assert len(package_handlers) == 1
    assert isinstance(package_handlers[0].formatter, JSONFormatter)
    assert other in logger.handlers
    assert logger.level == logging.DEBUG


def test_json_formatter_emits_one_object():
    record = logging.LogRecord(LOGGER_NAME, logging.WARNING, __file__, 1, "period limit %s", (1200,), None)

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == LOGGER_NAME
    assert data["message"] == "period limit 1200"
