# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Fixed-size binary records held as numpy structured scalars

A :class:`WrapStruct` subclass declares its on-disk layout as
``template_dtype``, a little-endian numpy structured dtype whose itemsize is
the record size.  The record behaves as a mapping of field names to values::

    hdr['vox_offset'] = 352
    hdr.keys()

Bytes in, bytes out: ``Klass(hdr.binaryblock) == hdr`` for every record,
with fields nothing interprets written back unchanged.

Records decoded from bytes are checked (unless ``check=False``) by the
classes' ``_get_checks`` battery; see :mod:`niivox.batteryrunners` and
:mod:`niivox.imageglobals` for how problems are logged or raised.
"""
import numpy as np

from . import imageglobals
from .batteryrunners import BatteryRunner
from .errors import FormatError
from .volumeutils import pretty_mapping


class WrapStructError(FormatError):
    """Binary block is not the size of the record"""


class WrapStruct:
    # one field record, replaced by subclasses
    template_dtype = np.dtype([('integer', '<i2')])

    def __init__(self, binaryblock=None, check=True):
        """Record from `binaryblock`, or the default record for None

        Parameters
        ----------
        binaryblock : None or bytes-like, optional
            exactly ``template_dtype.itemsize`` bytes
        check : bool, optional
            run the checks on records decoded from `binaryblock`

        Raises
        ------
        WrapStructError
            if `binaryblock` has the wrong length

        >>> wstr = WrapStruct()
        >>> wstr['integer'] = 7
        >>> WrapStruct(wstr.binaryblock)['integer']
        array(7, dtype=int16)
        """
        if binaryblock is None:
            self._structarr = self.default_structarr()
            return
        n_bytes = self.template_dtype.itemsize
        if len(binaryblock) != n_bytes:
            raise WrapStructError(f'Expecting {n_bytes} byte record, '
                                  f'got {len(binaryblock)} bytes')
        self._structarr = np.frombuffer(
            binaryblock, dtype=self.template_dtype).reshape(()).copy()
        if check:
            self.check_fix()

    @classmethod
    def from_fileobj(klass, fileobj, check=True):
        """Read record at the current position of `fileobj`

        A short read raises :class:`WrapStructError`.
        """
        return klass(fileobj.read(klass.template_dtype.itemsize), check)

    @classmethod
    def default_structarr(klass):
        """All-zero record; subclasses fill in their defaults"""
        return np.zeros((), dtype=klass.template_dtype)

    @property
    def structarr(self):
        return self._structarr

    @property
    def binaryblock(self):
        """Record as ``bytes``"""
        return self._structarr.tobytes()

    def write_to(self, fileobj):
        fileobj.write(self.binaryblock)

    def copy(self):
        """Unchecked record with the same bytes"""
        return self.__class__(self.binaryblock, check=False)

    def __eq__(self, other):
        # Records are equal when their bytes are
        if not isinstance(other, WrapStruct):
            return NotImplemented
        return self.binaryblock == other.binaryblock

    # Mapping interface over the record fields

    def __getitem__(self, item):
        return self._structarr[item]

    def __setitem__(self, item, value):
        self._structarr[item] = value

    def __iter__(self):
        return iter(self.keys())

    def keys(self):
        return list(self.template_dtype.names)

    def values(self):
        return [self._structarr[key] for key in self.keys()]

    def items(self):
        return zip(self.keys(), self.values())

    def get(self, k, d=None):
        return self._structarr[k] if k in self.template_dtype.names else d

    def check_fix(self, logger=None, error_level=None):
        """Run the checks, logging and maybe raising their reports

        Parameters
        ----------
        logger : None or logging.Logger
            defaults to ``imageglobals.logger``
        error_level : None or int
            reports at or above this level raise; defaults to
            ``imageglobals.error_level``
        """
        if logger is None:
            logger = imageglobals.logger
        if error_level is None:
            error_level = imageglobals.error_level
        _, reports = BatteryRunner(self._get_checks()).check_fix(self)
        for report in reports:
            report.log_raise(logger, error_level)

    @classmethod
    def diagnose_binaryblock(klass, binaryblock):
        """Problems found in `binaryblock`, one per line"""
        reports = BatteryRunner(klass._get_checks()).check_only(
            klass(binaryblock, check=False))
        return '\n'.join(rep.message for rep in reports if rep.message)

    @classmethod
    def _get_checks(klass):
        return ()

    def __str__(self):
        return '\n'.join([f'{self.__class__} object', pretty_mapping(self)])


class LabeledWrapStruct(WrapStruct):
    """Record whose coded fields print as labels"""

    #: field name -> Recoder with a ``label`` field
    _field_recoders = {}

    def get_value_label(self, fieldname):
        """Label for the code stored in field `fieldname`

        Codes missing from the table give ``'<unknown code N>'``.  Fields
        without a code table raise ValueError.

        >>> from niivox.volumeutils import Recoder
        >>> class Rec(LabeledWrapStruct):
        ...     template_dtype = np.dtype([('xform', '<i2')])
        ...     _field_recoders = {'xform': Recoder(((1, 'scanner'),),
        ...                                         ('code', 'label'))}
        >>> rec = Rec()
        >>> rec.get_value_label('xform')
        '<unknown code 0>'
        >>> rec['xform'] = 1
        >>> rec.get_value_label('xform')
        'scanner'
        """
        if fieldname not in self._field_recoders:
            raise ValueError(f'{fieldname} not a coded field')
        code = int(self._structarr[fieldname])
        try:
            return self._field_recoders[fieldname].label[code]
        except KeyError:
            return f'<unknown code {code}>'

    def __str__(self):
        def _getter(obj, key):
            if key in obj._field_recoders:
                return obj.get_value_label(key)
            return obj[key]

        return '\n'.join([f'{self.__class__} object',
                          pretty_mapping(self, _getter)])
