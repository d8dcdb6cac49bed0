# Folder: copycat/
# File: reporter.py
import logging

logger = logging.getLogger(__name__)


class Reporter:
    """
    Sink for user-facing messages raised by the engine (rejected requests,
    codelet faults, batch results). Writes through the module logger.
    """

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def info(self, msg: str):
        self.log.info(msg)

    def warn(self, msg: str):
        self.log.warning(msg)

    def error(self, msg: str):
        self.log.error(msg)
