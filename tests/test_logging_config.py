"""
Tests for logging_config.py
===========================

Run: python -m pytest tests/test_logging_config.py -v
"""

import logging

import pytest

import logging_config
from logging_config import setup_logging


@pytest.fixture
def root_logger():
	logger = logging.getLogger()
	handlers, level = list(logger.handlers), logger.level
	quiet_levels = {name: logging.getLogger(name).level for name in logging_config.QUIET_LOGGERS}
	yield logger
	for handler in logger.handlers:
		if handler not in handlers:
			handler.close()
	logger.handlers = handlers
	logger.setLevel(level)
	for name, quiet_level in quiet_levels.items():
		logging.getLogger(name).setLevel(quiet_level)


def test_console_handler(root_logger):
	setup_logging(logging.DEBUG)
	assert root_logger.level == logging.DEBUG
	assert len(root_logger.handlers) == 1
	assert isinstance(root_logger.handlers[0], logging.StreamHandler)


def test_repeated_setup_does_not_duplicate(root_logger):
	setup_logging()
	setup_logging()
	assert len(root_logger.handlers) == 1


def test_plotting_libraries_are_quiet(root_logger):
	setup_logging(logging.DEBUG)
	assert logging.getLogger("matplotlib").level == logging.WARNING
	setup_logging(logging.ERROR)
	assert logging.getLogger("matplotlib").level == logging.ERROR


def test_log_file(root_logger, tmp_path):
	log_file = tmp_path / "search.log"
	setup_logging(logging.INFO, str(log_file))
	logging.getLogger("boundary_search").info("Searched 10 permutations")
	logging.getLogger("rhomb_boundary").debug("Boundary [0, 2] cannot be tiled")
	for handler in root_logger.handlers:
		handler.flush()
	text = log_file.read_text(encoding="utf-8")
	assert "Logging at level INFO" in text
	assert "boundary_search - INFO - Searched 10 permutations" in text
	assert "cannot be tiled" not in text


def test_new_log_file_replaces_old(root_logger, tmp_path):
	first, second = tmp_path / "first.log", tmp_path / "second.log"
	setup_logging(logging.INFO, str(first))
	setup_logging(logging.INFO, str(second))
	assert len(root_logger.handlers) == 2
	logging.getLogger("substitution").warning("Rule edited")
	for handler in root_logger.handlers:
		handler.flush()
	assert "Rule edited" not in first.read_text(encoding="utf-8")
	assert "Rule edited" in second.read_text(encoding="utf-8")
