import logging
import os
import sys

LOG_LEVEL_ENV = "AIRCAP_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
	logger = logging.getLogger(name)
	if not logger.handlers:
		handler = logging.StreamHandler(stream=sys.stdout)
		formatter = logging.Formatter(
			"%(asctime)s | %(levelname)s | %(name)s | %(message)s",
			datefmt="%H:%M:%S",
		)
		handler.setFormatter(formatter)
		logger.addHandler(handler)
		logger.setLevel(os.environ.get(LOG_LEVEL_ENV, "INFO").upper())
	logger.propagate = False
	return logger
