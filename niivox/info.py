"""Define static niivox metadata

The long description parameter is used in the niivox top-level docstring.
We exec this file in ``setup.py``, so it cannot import niivox or use
relative imports.
"""

__version__ = '0.1.0'

long_description = """
Read and write access to NIfTI1_ single file images (``.nii``, ``.nii.gz``).

niivox decodes the 348 byte NIfTI-1 header into a mapping of its fields, and
gives voxel level access to the image data: single samples, 2D slices and
per-voxel time series, as float32 values.  Images with 16 bit integer, 32 bit
and 64 bit float voxels can be read, built from scratch, modified in place and
saved, with every header field written back as it was read.

.. _NIfTI1: http://nifti.nimh.nih.gov/nifti-1/
"""
