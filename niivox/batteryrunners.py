# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Header checks and their reports

A check is a callable ``check(hdr, fix=False)`` returning ``(hdr, report)``.
niivox checks never alter the header they inspect, so that every field read
from disk is written back unchanged; with ``fix=True`` they only say so in
the report's ``fix_msg``.  The vox offset check of the NIfTI-1 header reads::

    def _chk_offset(hdr, fix=False):
        rep = Report(FormatError)
        if not hdr.is_single or hdr['vox_offset'] >= 352:
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = 'vox offset too low for single file nifti1'
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

Problem levels follow the :mod:`logging` levels: 0 for no problem, 10 for a
note, 30 for a warning, 40 for an error.
"""


class BatteryRunner:
    """Run a fixed sequence of checks

    >>> def chk_ok(hdr, fix=False):
    ...     return hdr, Report()
    >>> reports = BatteryRunner((chk_ok, chk_ok)).check_only({'dim': 3})
    >>> [rep.problem_level for rep in reports]
    [0, 0]
    """

    def __init__(self, checks):
        self._checks = tuple(checks)

    def check_only(self, obj):
        """Reports of all checks run on `obj` with ``fix=False``"""
        return [check(obj, False)[1] for check in self._checks]

    def check_fix(self, obj):
        """Run all checks with ``fix=True``; return `obj` and the reports"""
        reports = []
        for check in self._checks:
            obj, report = check(obj, True)
            reports.append(report)
        return obj, reports

    def __len__(self):
        return len(self._checks)


class Report:
    """Outcome of one check

    Parameters
    ----------
    error : None or exception class
        raised by :meth:`log_raise` for serious problems; None never raises
    problem_level : int
        0 (no problem) to 50 (severe)
    problem_msg : str
        what is wrong
    fix_msg : str
        what was (or was not) done about it
    """

    def __init__(self, error=Exception, problem_level=0, problem_msg='', fix_msg=''):
        self.error = error
        self.problem_level = problem_level
        self.problem_msg = problem_msg
        self.fix_msg = fix_msg

    def _state(self):
        return self.error, self.problem_level, self.problem_msg, self.fix_msg

    def __eq__(self, other):
        """
        >>> Report(problem_level=10) == Report(problem_level=20)
        False
        """
        if not isinstance(other, Report):
            return NotImplemented
        return self._state() == other._state()

    def __str__(self):
        return str(dict(zip(('error', 'problem_level', 'problem_msg', 'fix_msg'),
                            self._state())))

    @property
    def message(self):
        """Problem message, then the fix message if there is one"""
        return '; '.join(msg for msg in (self.problem_msg, self.fix_msg) if msg)

    def log_raise(self, logger, error_level=40):
        """Log a problem to `logger`; raise ``error`` at `error_level` or above"""
        if not self.problem_level:
            return
        logger.log(self.problem_level, self.message)
        if self.problem_level >= error_level and self.error:
            raise self.error(self.problem_msg)
