"""
Logging for the edge sequence search and the substitution scripts.

Every module logs to a logger named after itself (e.g. "boundary_search"
for the progress of a search, "rhomb_boundary" for boundaries that cannot
be tiled), so configuring the root logger here collects all of them.
"""


import logging
import sys


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# Third party loggers which are very chatty at debug level
QUIET_LOGGERS = ["matplotlib", "PIL"]


def _make_handler(handler, level):
	handler.setLevel(level)
	handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
	return handler


def setup_logging(level=logging.INFO, log_file=None):
	"""
	Sends the logs of every module to stdout and, optionally, to a file.

	Calling this again replaces the handlers set up previously, so a
	script can change the level or the log file without repeating
	records. The plotting libraries are held at WARNING so that a DEBUG
	run only shows the tiling and search records.

	Arguments:
	  level             The logging level (e.g. logging.DEBUG to see each
	                    boundary that fails to tile)
	  log_file          Optionally, the path of a file to also write the
	                    logs to (overwritten), e.g. to keep the results
	                    of a long search
	"""
	root = logging.getLogger()
	root.setLevel(level)
	for handler in list(root.handlers):
		root.removeHandler(handler)
		if isinstance(handler, logging.FileHandler):
			handler.close()
	root.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))
	if log_file:
		root.addHandler(_make_handler(
			logging.FileHandler(log_file, mode='w', encoding='utf-8'), level))
	for name in QUIET_LOGGERS:
		logging.getLogger(name).setLevel(max(level, logging.WARNING))
	root.info(f"Logging at level {logging.getLevelName(level)}")
