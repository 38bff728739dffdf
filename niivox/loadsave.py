# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Utilities to load and save image objects"""
from __future__ import annotations

import os
import typing as ty

from .errors import FormatError
from .filename_parser import _stringify_path, compression_suffix
from .image import Nifti1Image
from .openers import Opener

if ty.TYPE_CHECKING:
    from .filename_parser import FileSpec
    from .nifti1 import Nifti1Header

    class Signature(ty.TypedDict):
        signature: bytes
        format_name: str


def _signature_matches_extension(filename: FileSpec) -> tuple[bool, str]:
    """Check if signature aka magic number matches filename extension.

    Parameters
    ----------
    filename : str or os.PathLike
        Path to the file to check

    Returns
    -------
    matches : bool
       - `True` if the filename extension is not recognized (not .gz nor .bz2)
       - `True` if the magic number was successfully read and corresponds to
         the format indicated by the extension.
       - `False` otherwise.
    error_message : str
       An error message if opening the file failed or a mismatch is detected;
       the empty string otherwise.
    """
    signatures: dict[str, Signature] = {
        '.gz': {'signature': b'\x1f\x8b', 'format_name': 'gzip'},
        '.bz2': {'signature': b'BZh', 'format_name': 'bzip2'},
    }
    filename = _stringify_path(filename)
    ext = compression_suffix(filename)
    if ext not in signatures:
        return True, ''
    expected_signature = signatures[ext]['signature']
    with open(filename, 'rb') as fh:
        sniff = fh.read(len(expected_signature))
    if sniff.startswith(expected_signature):
        return True, ''
    format_name = signatures[ext]['format_name']
    return False, f'File {filename} is not a {format_name} file'


def _check_readable(filename: str) -> None:
    # Check file exists and is not empty
    try:
        stat_result = os.stat(filename)
    except OSError:
        raise FileNotFoundError(f"No such file or no access: '{filename}'")
    if stat_result.st_size <= 0:
        raise FormatError(f"Empty file: '{filename}'")
    matches, msg = _signature_matches_extension(filename)
    if not matches:
        raise FormatError(msg)


def load(filename: FileSpec, read_payload: bool = True) -> Nifti1Image:
    """Load NIfTI-1 image from `filename`

    Parameters
    ----------
    filename : str or os.PathLike
       ``.nii`` file, optionally compressed as ``.nii.gz`` or ``.nii.bz2``
    read_payload : bool, optional
       If False, only read the header and metadata.

    Returns
    -------
    img : Nifti1Image

    Raises
    ------
    FileNotFoundError
        if `filename` does not exist or cannot be accessed
    FormatError
        for empty files, compressed files with a bad signature or corrupt
        stream, short headers and truncated voxel data
    UnsupportedDatatype
        if the header gives a bytes per voxel other than 2, 4, 8
    """
    filename = _stringify_path(filename)
    _check_readable(filename)
    return Nifti1Image.from_filename(filename, read_payload=read_payload)


def load_header(filename: FileSpec) -> Nifti1Header:
    """Read and check only the 348 byte header of `filename`"""
    filename = _stringify_path(filename)
    _check_readable(filename)
    with Opener(filename) as fileobj:
        return Nifti1Image.header_class.from_fileobj(fileobj)


def save(img: Nifti1Image, filename: FileSpec, compress: bool = True) -> None:
    """Save `img` to `filename`

    Parameters
    ----------
    img : Nifti1Image
       image to save
    filename : str or os.PathLike
       output filename.  Must end in ``.gz`` (or ``.bz2``) if `compress` is
       True and must not otherwise.
    compress : bool, optional
       whether to compress the output file.  Default is True.
    """
    img.to_filename(filename, compress=compress)


def build(nx: int, ny: int, nz: int, nt: int, dtype='float32') -> Nifti1Image:
    """New zero-filled image with extents ``(nx, ny, nz, nt)``

    See :meth:`Nifti1Image.build`.
    """
    return Nifti1Image.build(nx, ny, nz, nt, dtype=dtype)
