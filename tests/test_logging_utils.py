"""Tests for fluxchart/logging_utils.py."""

import logging

from fluxchart.logging_utils import configure_logging, get_log_level, set_log_level


class TestLogLevel:
    def test_configure_sets_level_and_single_handler(self):
        configure_logging("debug")
        configure_logging("info")
        logger = logging.getLogger("fluxchart")
        assert get_log_level() == "INFO"
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        set_log_level("chatty")
        assert get_log_level() == "INFO"

    def test_module_loggers_propagate_to_package(self):
        set_log_level("ERROR")
        assert not logging.getLogger("fluxchart.chart").isEnabledFor(logging.INFO)
        set_log_level("DEBUG")
        assert logging.getLogger("fluxchart.chart").isEnabledFor(logging.DEBUG)
        set_log_level("WARNING")
