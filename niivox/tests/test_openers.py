# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Test for openers module"""
import gzip
import os
from bz2 import BZ2File
from io import BytesIO
from pathlib import Path

import pytest

from ..errors import FormatError
from ..openers import Opener


class Lunk:
    # bare file-like for testing
    closed = False

    def __init__(self, message):
        self.message = message

    def write(self, b, /):
        pass

    def read(self, size=-1, /):
        return self.message


def test_Opener():
    # Default mode reads
    fobj = Opener(__file__)
    assert fobj.fobj.mode == 'rb'
    assert fobj.me_opened
    fobj.close()
    assert fobj.closed
    # That it's a context manager
    with Opener(__file__) as fobj:
        assert not fobj.is_compressed
        assert fobj.name == Path(__file__).as_posix()
    assert fobj.closed
    # fileobj returns fileobj passed through
    message = b"Wine?  Wouldn't you?"
    for obj in (BytesIO(message), Lunk(message)):
        with Opener(obj) as fobj:
            assert fobj.fobj is obj
            assert not fobj.me_opened
            assert fobj.read() == message
        # Which does not close the object
        assert not obj.closed


def test_Opener_various(in_tmp_path):
    # Check we can do all sorts of files here
    message = b'Oh what a giveaway'
    sobj = BytesIO()
    for input in ('test.nii', 'test.nii.gz', 'test.nii.bz2', sobj):
        with Opener(input, 'wb') as fobj:
            assert fobj.write(message) == len(message)
        if input is sobj:
            input.seek(0)
        with Opener(input, 'rb') as fobj:
            assert fobj.read(3) == b'Oh '
            assert fobj.read() == message[3:]
    # Files written through compressing streams are compressed on disk
    assert Path('test.nii.gz').read_bytes()[:2] == b'\x1f\x8b'
    assert Path('test.nii.bz2').read_bytes()[:3] == b'BZh'
    assert Path('test.nii').read_bytes() == message


def test_compressed_types(in_tmp_path):
    for fname, klass in (('test.nii.gz', gzip.GzipFile),
                         ('test.nii.bz2', BZ2File)):
        with Opener(fname, 'wb') as fobj:
            assert isinstance(fobj.fobj, klass)
            assert fobj.is_compressed
            assert fobj.name == fname


def test_gzip_close_closes_file(in_tmp_path):
    fobj = Opener('test.nii.gz', 'wb')
    raw = fobj._raw
    assert not raw.closed
    fobj.close()
    assert fobj.closed
    assert raw.closed


def test_suffix_case(in_tmp_path):
    # Compression suffixes match without regard to case
    for fname in ('test.nii.GZ', 'test.nii.Gz', 'test.NII.BZ2'):
        with Opener(fname, 'wb') as fobj:
            assert fobj.is_compressed
            fobj.write(b'some data')
        with Opener(fname) as fobj:
            assert fobj.read() == b'some data'
    # Other names are plain files
    with Opener('test.nii.gzip', 'wb') as fobj:
        assert not fobj.is_compressed


def test_pathlike(in_tmp_path):
    path = Path('test.nii.gz')
    with Opener(path, 'wb') as fobj:
        fobj.write(b'from a path')
        assert fobj.name == 'test.nii.gz'
    with Opener(in_tmp_path / 'test.nii.gz') as fobj:
        assert fobj.read() == b'from a path'


def test_missing_file(in_tmp_path):
    for fname in ('missing.nii', 'missing.nii.gz', 'missing.nii.bz2'):
        with pytest.raises(FileNotFoundError):
            Opener(fname)


def test_corrupt_compressed(in_tmp_path):
    # Not gzip at all
    Path('bad.nii.gz').write_bytes(b'this is not gzip data')
    with Opener('bad.nii.gz') as fobj:
        with pytest.raises(FormatError):
            fobj.read()
    # Truncated gzip stream
    with gzip.open('whole.nii.gz', 'wb') as gzf:
        gzf.write(os.urandom(1000))
    contents = Path('whole.nii.gz').read_bytes()
    Path('short.nii.gz').write_bytes(contents[:len(contents) // 2])
    with Opener('short.nii.gz') as fobj:
        with pytest.raises(FormatError):
            fobj.read()
    Path('bad.nii.bz2').write_bytes(b'BZh9 but not really')
    with Opener('bad.nii.bz2') as fobj:
        with pytest.raises(FormatError):
            fobj.read()


def test_compresslevel(in_tmp_path):
    # Default compression level is fast compression
    assert Opener.default_compresslevel == 1
    data = b'0123456789' * 10000
    with Opener('fast.nii.gz', 'wb') as fobj:
        fobj.write(data)
    with Opener('best.nii.gz', 'wb', 9) as fobj:
        fobj.write(data)
    with Opener('none.nii.gz', 'wb', compresslevel=0) as fobj:
        fobj.write(data)
    fast = os.stat('fast.nii.gz').st_size
    best = os.stat('best.nii.gz').st_size
    none = os.stat('none.nii.gz').st_size
    assert best <= fast < none
    with Opener('none.nii.gz') as fobj:
        assert fobj.read() == data


def test_deterministic_gzip(in_tmp_path):
    # Same content always gives the same bytes on disk
    msg = b'Hello, I\'d like to have an argument.'
    with Opener('ref.nii.gz', 'wb') as fobj:
        fobj.write(msg)
    with Opener('other.nii.gz', 'wb') as fobj:
        fobj.write(msg)
    assert Path('ref.nii.gz').read_bytes() == Path('other.nii.gz').read_bytes()
    with gzip.open('ref.nii.gz') as gzf:
        assert gzf.read() == msg
        assert gzf.mtime == 0
