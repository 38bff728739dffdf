# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##

from .info import __version__, long_description as __doc__

__doc__ += """
Quickstart
==========

::

   import niivox

   img = niivox.load('func.nii.gz')
   nx, ny, nz, nt = img.get_dims()
   value = img.get(10, 20, 15, 0)
   axial = img.get_slice(15, 0)
   series = img.get_time_series(10, 20, 15)

   new_img = niivox.build(64, 64, 30, 1)
   new_img.set(1, 2, 3, 0, 42.0)
   niivox.save(new_img, 'new_image.nii.gz')
"""

# module imports
from . import imageglobals

# object imports
from .converters import SampleCodec
from .errors import (FormatError, ImageDataError, IndexOutOfRange, NiftiError,
                     UnsupportedDatatype)
from .image import Nifti1Image
from .loadsave import build, load, load_header, save
from .nifti1 import Nifti1Header
