# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Code tables and small helpers shared by the header and image modules"""

from functools import reduce
from operator import mul

import numpy as np

#: NIfTI-1 single files are read and written little-endian only
disk_code = '<'


class Recoder:
    """Look up any column of a code table from any of its values

    Each row of the table is a sequence whose leading entries fill the named
    `fields`; every entry of the row, including trailing aliases, can be used
    as a key into every field.

    >>> units = Recoder(((2, 'mm', 'millimeter'), (8, 'sec')), ('code', 'label'))
    >>> units.code['millimeter']
    2
    >>> units.label[8]
    'sec'
    >>> units['mm']
    2
    >>> 'msec' in units
    False
    """

    def __init__(self, codes, fields=('code',)):
        self.fields = tuple(fields)
        for name in self.fields:
            if name in self.__dict__:
                raise KeyError(f'Field name {name} clashes with attribute')
            setattr(self, name, {})
        self.add_codes(codes)

    def add_codes(self, code_syn_seqs):
        """Add rows `code_syn_seqs` to the table

        Later rows override earlier ones for keys they share.
        """
        for row in code_syn_seqs:
            for key in row:
                for i, name in enumerate(self.fields):
                    getattr(self, name)[key] = row[i]

    def __getitem__(self, key):
        """Value in the first field for `key`"""
        return getattr(self, self.fields[0])[key]

    def __contains__(self, key):
        try:
            self[key]
        except (KeyError, TypeError):
            return False
        return True

    def keys(self):
        """Every value and alias the table accepts"""
        return getattr(self, self.fields[0]).keys()


def make_dt_codes(codes_seqs):
    """Datatype Recoder from ``(code, label, type, niistring)`` rows

    A ``dtype`` field is added, and the numpy dtype joins each row's aliases,
    so that the table can be indexed with codes, labels, numpy types,
    dtypes or NIfTI type strings.

    >>> dts = make_dt_codes(((16, 'float32', np.float32, 'NIFTI_TYPE_FLOAT32'),))
    >>> dts.code[np.dtype('f4')], dts.label['NIFTI_TYPE_FLOAT32']
    (16, 'float32')
    """
    rows = []
    for code, label, np_type, niistring in codes_seqs:
        rows.append((code, label, np_type, niistring, np.dtype(np_type)))
    return Recoder(rows, ('code', 'label', 'type', 'niistring', 'dtype'))


def pretty_mapping(mapping, getterfunc=None):
    """Text with one ``key : value`` line per key of `mapping`

    Values line up in one column.  `getterfunc(mapping, key)`, if given,
    replaces ``mapping[key]`` for fetching the values.

    >>> print(pretty_mapping({'dim': 3, 'datatype': 16}))
    dim       : 3
    datatype  : 16
    """
    if getterfunc is None:
        getterfunc = lambda obj, key: obj[key]
    width = max(len(str(key)) for key in mapping)
    return '\n'.join(f'{key!s:<{width}}  : {getterfunc(mapping, key)}'
                     for key in mapping)


def prod(values):
    """Product of integer sequence `values`, 1 for an empty sequence

    >>> prod((10, 10, 10, 1))
    1000
    >>> prod(())
    1
    """
    return reduce(mul, (int(v) for v in values), 1)
