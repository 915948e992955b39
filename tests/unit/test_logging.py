"""Unit tests for :mod:`assetlookups.logging`."""

import logging

from rich.logging import RichHandler

from assetlookups.logging import (
    ThirdPartyPrefixFilter,
    config_console_handler,
    config_flight_recorder,
)


def _record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)


def test_prefix_filter_marks_third_party_records():
    prefix_filter = ThirdPartyPrefixFilter()
    own, foreign = _record("assetlookups.cache.coordinator"), _record(
        "sqlalchemy.engine.Engine"
    )
    assert prefix_filter.filter(own) and prefix_filter.filter(foreign)
    assert own.prefix == ""
    assert foreign.prefix == "[sqlalchemy]"


def test_console_handler_levels():
    assert config_console_handler(level=logging.WARNING).level == logging.WARNING
    debug = config_console_handler(level=logging.WARNING, debug_mode=True)
    assert isinstance(debug, RichHandler)
    assert debug.level == logging.DEBUG


def test_flight_recorder_flushes_on_warning(tmp_path):
    path = tmp_path / "latest.log"
    recorder = config_flight_recorder(path, capacity=10)
    logger = logging.getLogger("assetlookups.tests.flight")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(recorder)
    try:
        logger.debug("priming")
        assert path.read_text(encoding="utf-8") == ""
        logger.warning("disk cache unwritable")
        text = path.read_text(encoding="utf-8")
        assert "priming" in text
        assert "WARNING assetlookups.tests.flight" in text
    finally:
        logger.removeHandler(recorder)
        recorder.close()
        recorder.target.close()
