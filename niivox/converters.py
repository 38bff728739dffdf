# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Conversion between on-disk voxel bytes and float32 samples

There is one :class:`SampleCodec` per supported on-disk voxel width.  An image
resolves its codec once, from the header, when it is loaded or built:

* 2 bytes per voxel - little-endian 16 bit integers.  Values are unsigned
  unless the header ``datatype`` declares ``int16`` (code 4).  Written
  samples are truncated toward zero and clipped to the integer range.
* 4 bytes per voxel - IEEE-754 single precision floats; samples round trip
  exactly.
* 8 bytes per voxel - IEEE-754 double precision floats.  Samples are read as
  single precision, and single precision samples are widened when written.

>>> codec = SampleCodec.from_nbyper(2)
>>> codec
<SampleCodec.UINT16: ('<u2', 512)>
>>> float(codec.decode(codec.encode(41.9)))
41.0
>>> float(SampleCodec.from_nbyper(4).decode(b'\\x00\\x00(B'))
42.0
"""
import enum

import numpy as np

from .errors import UnsupportedDatatype
from .nifti1 import data_type_codes


class SampleCodec(enum.Enum):
    """Voxel codec, tagged by on-disk dtype and NIfTI ``datatype`` code"""

    UINT16 = ('<u2', 512)
    INT16 = ('<i2', 4)
    FLOAT32 = ('<f4', 16)
    FLOAT64 = ('<f8', 64)

    def __init__(self, dtype_str, datatype_code):
        self.dtype = np.dtype(dtype_str)
        self.datatype_code = datatype_code

    @property
    def nbyper(self):
        return self.dtype.itemsize

    @classmethod
    def from_nbyper(klass, nbyper, datatype=None):
        """Return codec for `nbyper` bytes per voxel

        Parameters
        ----------
        nbyper : int
            bytes per voxel, one of 2, 4, 8
        datatype : None or int, optional
            NIfTI ``datatype`` code from the header.  Only used to tell
            signed from unsigned 16 bit data.

        Raises
        ------
        UnsupportedDatatype
            for any other `nbyper`
        """
        if nbyper == 2:
            return klass.INT16 if datatype == klass.INT16.datatype_code else klass.UINT16
        if nbyper == 4:
            return klass.FLOAT32
        if nbyper == 8:
            return klass.FLOAT64
        raise UnsupportedDatatype(f'No sample codec for {nbyper} bytes per voxel')

    @classmethod
    def from_header(klass, header):
        """Return codec for a ``Nifti1Header``"""
        return klass.from_nbyper(header.get_nbyper(), int(header['datatype']))

    @classmethod
    def from_datatype(klass, datatype):
        """Return codec for NIfTI datatype code, label or numpy type

        >>> SampleCodec.from_datatype('int16')
        <SampleCodec.INT16: ('<i2', 4)>
        >>> SampleCodec.from_datatype(np.float64)
        <SampleCodec.FLOAT64: ('<f8', 64)>
        """
        try:
            code = data_type_codes.code[datatype]
        except (KeyError, TypeError):
            code = None
        for codec in klass:
            if codec.datatype_code == code:
                return codec
        raise UnsupportedDatatype(
            f'datatype {datatype!r} is not one of '
            f'{[data_type_codes.label[c.datatype_code] for c in klass]}')

    def decode(self, buffer, offset=0):
        """Sample (``np.float32``) from `nbyper` bytes of `buffer` at `offset`"""
        value = np.frombuffer(buffer, dtype=self.dtype, count=1, offset=offset)[0]
        return np.float32(value)

    def encode(self, value):
        """Bytes for sample `value` in this codec's on-disk representation"""
        if self.dtype.kind in 'iu':
            # clip in double precision
            sample = np.float64(value)
            if not np.isfinite(sample):
                raise ValueError(f'Cannot store {value} as {self.dtype.name}')
            info = np.iinfo(self.dtype)
            sample = np.clip(np.trunc(sample), info.min, info.max)
        else:
            with np.errstate(over='ignore'):
                sample = np.float32(value)
        return np.array(sample, dtype=self.dtype).tobytes()

    def encode_into(self, buffer, offset, value):
        """Write encoded `value` into writable `buffer` at byte `offset`"""
        buffer[offset:offset + self.nbyper] = self.encode(value)

    def view(self, buffer, shape):
        """Array of on-disk values in `buffer`, first axis fastest

        The returned array shares memory with `buffer`.
        """
        return np.ndarray(shape, dtype=self.dtype, buffer=buffer, order='F')

    def to_samples(self, arr):
        """Cast array of on-disk values to float32 samples"""
        return np.asarray(arr).astype(np.float32)
