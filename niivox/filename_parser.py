# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Filename handling for image paths"""
from __future__ import annotations

import os
import pathlib
import typing as ty

if ty.TYPE_CHECKING:  # pragma: no cover
    FileSpec = ty.Union[str, os.PathLike]

#: Suffixes marking whole-file compression, handled by the openers
compressed_suffixes = ('.gz', '.bz2')


def _stringify_path(filepath: FileSpec) -> str:
    """Path-like `filepath` as a string, with ``~`` expanded

    >>> _stringify_path(pathlib.Path('sub') / 'img.nii.gz')
    'sub/img.nii.gz'
    """
    return pathlib.Path(filepath).expanduser().as_posix()


def compression_suffix(filename: FileSpec) -> str:
    """Lower case compression suffix `filename` ends with, or ``''``

    Case is ignored when matching.

    >>> compression_suffix('func.nii.GZ')
    '.gz'
    >>> compression_suffix('func.nii')
    ''
    >>> compression_suffix('archive.tgz')
    ''
    """
    lower_name = _stringify_path(filename).lower()
    for suffix in compressed_suffixes:
        if lower_name.endswith(suffix):
            return suffix
    return ''


def is_compressed_name(filename: FileSpec) -> bool:
    """True if `filename` ends with a compression suffix

    >>> is_compressed_name('img.nii.bz2')
    True
    """
    return compression_suffix(filename) != ''
