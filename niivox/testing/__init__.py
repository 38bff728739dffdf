# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Utilities for testing"""

import logging
from io import BytesIO, StringIO

import numpy as np

from ..errors import FormatError
from ..nifti1 import Nifti1Header


def make_header(shape=(2, 3, 4, 1), datatype='float32', **fields):
    """Single file header with `shape`, `datatype` and other `fields` set"""
    hdr = Nifti1Header()
    hdr.set_data_shape(shape)
    hdr.set_data_dtype(datatype)
    for key, value in fields.items():
        hdr[key] = value
    return hdr


def make_nifti_bytes(arr, datatype=None, extra=b'\x00' * 4, hdr=None):
    """Contents of a ``.nii`` file holding array `arr`

    Parameters
    ----------
    arr : array-like
        voxel values, written first axis fastest
    datatype : None or str or int, optional
        NIfTI datatype for the voxels.  None gives the dtype of `arr`.
    extra : bytes, optional
        bytes between header and voxel data; sets ``vox_offset``
    hdr : None or Nifti1Header, optional
        header to start from.  Shape, datatype and offset are set from the
        other arguments.
    """
    arr = np.asarray(arr)
    if datatype is None:
        datatype = arr.dtype
    if hdr is None:
        hdr = Nifti1Header()
    hdr.set_data_shape(arr.shape)
    hdr.set_data_dtype(datatype)
    hdr.set_data_offset(hdr.sizeof_hdr + len(extra))
    out_dtype = hdr.get_data_dtype()
    return (hdr.binaryblock + bytes(extra) +
            arr.astype(out_dtype).tobytes(order='F'))


def bytesio_round_trip(img):
    """Save then load image from bytesio"""
    bio = BytesIO()
    img.to_fileobj(bio)
    bio.seek(0)
    return img.__class__.from_fileobj(bio)


def log_chk(hdr, level):
    """Utility method to check header checking / logging

    Asserts that log entry appears during ``hdr.check_fix`` for logging level
    below `level`.

    Parameters
    ----------
    hdr : instance
        Instance of header class, with methods ``copy`` and ``check_fix``.
        The header has some defect which can be detected with ``check_fix``.
    level : int
        Level (severity) of defect present in `hdr`.

    Returns
    -------
    message : str
        Message generated in log when defect was detected.
    raiser : tuple
        Tuple of error type, callable, arguments that will raise an exception
        when then defect is detected.  Empty when `level` is 0.
    """
    str_io = StringIO()
    logger = logging.getLogger('niivox.test.logger')
    handler = logging.StreamHandler(str_io)
    logger.addHandler(handler)
    try:
        if level == 0:  # Should never log or raise error
            logger.setLevel(0)
            hdr.copy().check_fix(logger=logger, error_level=0)
            assert str_io.getvalue() == ''
            return '', ()
        # Logging level above threshold, no log.
        logger.setLevel(level + 1)
        hdr.copy().check_fix(logger=logger, error_level=level + 1)
        assert str_io.getvalue() == ''
        # Logging level below threshold, log appears
        logger.setLevel(level - 1)
        hdr.copy().check_fix(logger=logger, error_level=level + 1)
        message = str_io.getvalue().strip()
        assert message != ''
    finally:
        logger.removeHandler(handler)
    return message, (FormatError, hdr.copy().check_fix, logger, level)
