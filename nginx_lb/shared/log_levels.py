"""Custom logging levels for the application.

This module defines a TRACE level below DEBUG for dumping rendered
configuration and raw container records.
"""

import logging

TRACE = 5


def setup_trace_logging():
    """Set up the TRACE logging level in Python's logging system."""
    logging.addLevelName(TRACE, "TRACE")

    def trace(self, message, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)

    logging.Logger.trace = trace
    logging.TRACE = TRACE

    return TRACE


TRACE_LEVEL = setup_trace_logging()
