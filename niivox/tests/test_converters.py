# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Tests for voxel sample codecs"""
import struct

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from ..converters import SampleCodec
from ..errors import UnsupportedDatatype
from ..testing import make_header


def test_from_nbyper():
    assert SampleCodec.from_nbyper(2) is SampleCodec.UINT16
    assert SampleCodec.from_nbyper(2, 512) is SampleCodec.UINT16
    assert SampleCodec.from_nbyper(2, 4) is SampleCodec.INT16
    assert SampleCodec.from_nbyper(4) is SampleCodec.FLOAT32
    assert SampleCodec.from_nbyper(4, 4) is SampleCodec.FLOAT32
    assert SampleCodec.from_nbyper(8) is SampleCodec.FLOAT64
    for nbyper in (0, 1, 3, 16):
        with pytest.raises(UnsupportedDatatype):
            SampleCodec.from_nbyper(nbyper)


def test_from_header():
    assert SampleCodec.from_header(make_header(datatype='int16')) is SampleCodec.INT16
    assert SampleCodec.from_header(make_header(datatype='uint16')) is SampleCodec.UINT16
    assert SampleCodec.from_header(make_header(datatype='float64')) is SampleCodec.FLOAT64
    hdr = make_header()
    hdr['bitpix'] = 24
    with pytest.raises(UnsupportedDatatype):
        SampleCodec.from_header(hdr)


def test_from_datatype():
    assert SampleCodec.from_datatype('float32') is SampleCodec.FLOAT32
    assert SampleCodec.from_datatype(16) is SampleCodec.FLOAT32
    assert SampleCodec.from_datatype(np.dtype('<u2')) is SampleCodec.UINT16
    assert SampleCodec.from_datatype(np.int16) is SampleCodec.INT16
    for bad in ('uint8', 'int32', 'complex64', 'implausible', None, [1]):
        with pytest.raises(UnsupportedDatatype):
            SampleCodec.from_datatype(bad)


def test_attributes():
    assert [c.nbyper for c in SampleCodec] == [2, 2, 4, 8]
    assert SampleCodec.FLOAT64.dtype == np.dtype('<f8')
    assert SampleCodec.UINT16.datatype_code == 512


def test_decode():
    assert SampleCodec.UINT16.decode(b'\x2a\x00') == 42
    assert SampleCodec.UINT16.decode(b'\xff\xff') == 65535
    assert SampleCodec.INT16.decode(b'\xff\xff') == -1
    val = SampleCodec.FLOAT32.decode(struct.pack('<f', 42.0))
    assert type(val) is np.float32
    assert val == 42.0
    # Offsets into a larger buffer
    buf = b'\x00' * 8 + struct.pack('<d', -2.5)
    assert SampleCodec.FLOAT64.decode(buf, 8) == -2.5
    # Double precision values are narrowed to float32
    val = SampleCodec.FLOAT64.decode(struct.pack('<d', 0.1))
    assert type(val) is np.float32
    assert val == np.float32(0.1)


def test_encode():
    assert SampleCodec.FLOAT32.encode(42.0) == struct.pack('<f', 42.0)
    assert SampleCodec.FLOAT64.encode(0.5) == struct.pack('<d', 0.5)
    assert SampleCodec.FLOAT64.encode(0.1) == struct.pack('<d', float(np.float32(0.1)))
    # Integers truncate toward zero
    assert SampleCodec.UINT16.encode(41.9) == b'\x29\x00'
    assert SampleCodec.INT16.encode(-3.7) == struct.pack('<h', -3)
    # and clip to range
    assert SampleCodec.UINT16.encode(-5) == b'\x00\x00'
    assert SampleCodec.UINT16.encode(70000) == b'\xff\xff'
    assert SampleCodec.INT16.encode(40000) == struct.pack('<h', 32767)
    assert SampleCodec.INT16.encode(-40000) == struct.pack('<h', -32768)
    # including values float32 cannot hold
    assert SampleCodec.UINT16.encode(1e40) == b'\xff\xff'
    assert SampleCodec.INT16.encode(-1e40) == struct.pack('<h', -32768)
    assert SampleCodec.INT16.encode(np.float64(1e300)) == struct.pack('<h', 32767)
    # Finite values beyond float32 overflow to infinity as floats
    assert SampleCodec.FLOAT32.encode(1e40) == struct.pack('<f', np.inf)
    for codec in (SampleCodec.UINT16, SampleCodec.INT16):
        with pytest.raises(ValueError):
            codec.encode(np.nan)
        with pytest.raises(ValueError):
            codec.encode(np.inf)
    # Floats keep non-finite values
    assert np.isnan(SampleCodec.FLOAT32.decode(SampleCodec.FLOAT32.encode(np.nan)))


def test_encode_into():
    buf = bytearray(12)
    SampleCodec.FLOAT32.encode_into(buf, 4, 7.25)
    assert buf == b'\x00' * 4 + struct.pack('<f', 7.25) + b'\x00' * 4
    SampleCodec.UINT16.encode_into(buf, 10, 300)
    assert buf[10:] == struct.pack('<H', 300)


def test_view():
    arr = np.arange(24, dtype='<i2').reshape((2, 3, 4), order='F')
    buf = bytearray(arr.tobytes(order='F'))
    view = SampleCodec.INT16.view(buf, (2, 3, 4))
    assert_array_equal(view, arr)
    # First axis fastest
    assert view[1, 0, 0] == 1
    assert view[0, 1, 0] == 2
    assert view[0, 0, 1] == 6
    # View shares memory with buffer
    SampleCodec.INT16.encode_into(buf, 0, 99)
    assert view[0, 0, 0] == 99
    samples = SampleCodec.INT16.to_samples(view)
    assert samples.dtype == np.float32
    assert_array_equal(samples, arr.astype(np.float32) + np.where(arr == 0, 99, 0))
