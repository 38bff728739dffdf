# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Exceptions raised when reading, writing and indexing NIfTI-1 images

Failures to open or write a path are not wrapped; they surface as the builtin
``OSError`` family (``FileNotFoundError``, ``PermissionError`` ...).
"""


class NiftiError(Exception):
    """Base class for errors raised by niivox"""


class FormatError(NiftiError, ValueError):
    """Binary data does not form a readable NIfTI-1 single file

    Raised for short headers, corrupt compressed streams, inconsistent
    dimensions and truncated voxel payloads.
    """


class UnsupportedDatatype(NiftiError):
    """Bytes per voxel is not one of 2, 4 or 8"""


class IndexOutOfRange(NiftiError, IndexError):
    """Voxel coordinate outside the extents declared in the header"""


class ImageDataError(NiftiError):
    """Voxel data requested from an image loaded without its payload"""
