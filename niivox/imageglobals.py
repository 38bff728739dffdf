# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Defaults for header checking and logging

``error_level`` is the problem level (see :mod:`niivox.batteryrunners`) at
which a header check raises rather than only logging.  Header checks use
levels in the range 0 to 50, mirroring the :mod:`logging` levels; the default
of 40 means that only errors (a big-endian header, impossible dimensions, a
voxel offset inside the header) stop a load, while warnings such as an
unexpected magic string are logged and the file is read anyway.

``logger`` is the default logger used to report header problems.  To see
every report, use e.g. ``logger.setLevel(1)``.
"""
import logging

error_level = 40
logger = logging.getLogger('niivox.global')
logger.addHandler(logging.StreamHandler())


class ErrorLevel:
    """Context manager to set header check error level

    Examples
    --------
    >>> from niivox import imageglobals
    >>> with ErrorLevel(50):
    ...     imageglobals.error_level
    50
    >>> imageglobals.error_level
    40
    """

    def __init__(self, level):
        self.level = level

    def __enter__(self):
        global error_level
        self._original_level = error_level
        error_level = self.level

    def __exit__(self, exc, value, tb):
        global error_level
        error_level = self._original_level
        return False


class LoggingOutputSuppressor:
    """Context manager to stop the global logger from printing"""

    def __enter__(self):
        self.orig_handlers = list(logger.handlers)
        for handler in self.orig_handlers:
            logger.removeHandler(handler)

    def __exit__(self, exc, value, tb):
        for handler in self.orig_handlers:
            logger.addHandler(handler)
