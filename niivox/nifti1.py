# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Read / write the NIfTI-1 single file header

NIfTI1 format defined at http://nifti.nimh.nih.gov/nifti-1/

The header is the first 348 bytes of a ``.nii`` file.  It is always read and
written little-endian.  Besides the codec, :class:`Nifti1Header` derives the
grid model used by images: number of dimensions, per-axis extents, voxel
count, bytes per voxel and grid spacings.
"""
import numpy as np

from .batteryrunners import Report
from .errors import FormatError, UnsupportedDatatype
from .volumeutils import Recoder, disk_code, make_dt_codes, prod
from .wrapstruct import LabeledWrapStruct

# nifti1 flat header definition for Analyze-like first 348 bytes
# first number in comments indicates offset in file header in bytes
header_dtd = [
    ('sizeof_hdr', 'i4'),      # 0; must be 348
    ('data_type', 'S10'),      # 4; unused
    ('db_name', 'S18'),        # 14; unused
    ('extents', 'i4'),         # 32; unused
    ('session_error', 'i2'),   # 36; unused
    ('regular', 'S1'),         # 38; unused
    ('dim_info', 'u1'),        # 39; MRI slice ordering code
    ('dim', 'i2', (8,)),       # 40; data array dimensions
    ('intent_p1', 'f4'),       # 56; first intent parameter
    ('intent_p2', 'f4'),       # 60; second intent parameter
    ('intent_p3', 'f4'),       # 64; third intent parameter
    ('intent_code', 'i2'),     # 68; NIFTI intent code
    ('datatype', 'i2'),        # 70; it's the datatype
    ('bitpix', 'i2'),          # 72; number of bits per voxel
    ('slice_start', 'i2'),     # 74; first slice index
    ('pixdim', 'f4', (8,)),    # 76; grid spacings (units below)
    ('vox_offset', 'f4'),      # 108; offset to data in image file
    ('scl_slope', 'f4'),       # 112; data scaling slope
    ('scl_inter', 'f4'),       # 116; data scaling intercept
    ('slice_end', 'i2'),       # 120; last slice index
    ('slice_code', 'u1'),      # 122; slice timing order
    ('xyzt_units', 'u1'),      # 123; units of pixdim[1..4]
    ('cal_max', 'f4'),         # 124; max display intensity
    ('cal_min', 'f4'),         # 128; min display intensity
    ('slice_duration', 'f4'),  # 132; time for 1 slice
    ('toffset', 'f4'),         # 136; time axis shift
    ('glmax', 'i4'),           # 140; unused
    ('glmin', 'i4'),           # 144; unused
    ('descrip', 'S80'),        # 148; any text
    ('aux_file', 'S24'),       # 228; auxiliary filename
    ('qform_code', 'i2'),      # 252; xform code
    ('sform_code', 'i2'),      # 254; xform code
    ('quatern_b', 'f4'),       # 256; quaternion b param
    ('quatern_c', 'f4'),       # 260; quaternion c param
    ('quatern_d', 'f4'),       # 264; quaternion d param
    ('qoffset_x', 'f4'),       # 268; quaternion x shift
    ('qoffset_y', 'f4'),       # 272; quaternion y shift
    ('qoffset_z', 'f4'),       # 276; quaternion z shift
    ('srow_x', 'f4', (4,)),    # 280; 1st row affine transform
    ('srow_y', 'f4', (4,)),    # 296; 2nd row affine transform
    ('srow_z', 'f4', (4,)),    # 312; 3rd row affine transform
    ('intent_name', 'S16'),    # 328; name or meaning of data
    ('magic', 'S4')            # 344; must be 'ni1\0' or 'n+1\0'
]

# Full header numpy dtype, fixed to the on-disk byte order
header_dtype = np.dtype(header_dtd).newbyteorder(disk_code)

_dtdefs = (  # code, label, dtype definition, niistring
    (0, 'none', np.void, ''),
    (1, 'binary', np.void, ''),
    (2, 'uint8', np.uint8, 'NIFTI_TYPE_UINT8'),
    (4, 'int16', np.int16, 'NIFTI_TYPE_INT16'),
    (8, 'int32', np.int32, 'NIFTI_TYPE_INT32'),
    (16, 'float32', np.float32, 'NIFTI_TYPE_FLOAT32'),
    (32, 'complex64', np.complex64, 'NIFTI_TYPE_COMPLEX64'),
    (64, 'float64', np.float64, 'NIFTI_TYPE_FLOAT64'),
    (128, 'RGB', np.dtype([('R', 'u1'),
                           ('G', 'u1'),
                           ('B', 'u1')]), 'NIFTI_TYPE_RGB24'),
    (256, 'int8', np.int8, 'NIFTI_TYPE_INT8'),
    (512, 'uint16', np.uint16, 'NIFTI_TYPE_UINT16'),
    (768, 'uint32', np.uint32, 'NIFTI_TYPE_UINT32'),
    (1024, 'int64', np.int64, 'NIFTI_TYPE_INT64'),
    (1280, 'uint64', np.uint64, 'NIFTI_TYPE_UINT64'),
    (1792, 'complex128', np.complex128, 'NIFTI_TYPE_COMPLEX128'),
    (2304, 'RGBA', np.dtype([('R', 'u1'),
                             ('G', 'u1'),
                             ('B', 'u1'),
                             ('A', 'u1')]), 'NIFTI_TYPE_RGBA32'),
)

# Make full code alias bank, including dtype column
data_type_codes = make_dt_codes(_dtdefs)

# Transform (qform, sform) codes
xform_codes = Recoder((  # code, label, niistring
    (0, 'unknown', 'NIFTI_XFORM_UNKNOWN'),
    (1, 'scanner', 'NIFTI_XFORM_SCANNER_ANAT'),
    (2, 'aligned', 'NIFTI_XFORM_ALIGNED_ANAT'),
    (3, 'talairach', 'NIFTI_XFORM_TALAIRACH'),
    (4, 'mni', 'NIFTI_XFORM_MNI_152')), fields=('code', 'label', 'niistring'))

# unit codes
unit_codes = Recoder((  # code, label
    (0, 'unknown'),
    (1, 'meter'),
    (2, 'mm'),
    (3, 'micron'),
    (8, 'sec'),
    (16, 'msec'),
    (24, 'usec'),
    (32, 'hz'),
    (40, 'ppm'),
    (48, 'rads')), fields=('code', 'label'))

slice_order_codes = Recoder((  # code, label
    (0, 'unknown'),
    (1, 'sequential increasing', 'seq inc'),
    (2, 'sequential decreasing', 'seq dec'),
    (3, 'alternating increasing', 'alt inc'),
    (4, 'alternating decreasing', 'alt dec'),
    (5, 'alternating increasing 2', 'alt inc 2'),
    (6, 'alternating decreasing 2', 'alt dec 2')), fields=('code', 'label'))

#: Bytes per voxel that images can read and write
SUPPORTED_NBYPER = (2, 4, 8)


class Nifti1Header(LabeledWrapStruct):
    """Class for NIfTI1 single file header

    Examples
    --------
    >>> hdr = Nifti1Header()
    >>> hdr.set_data_shape((10, 10, 10, 1))
    >>> hdr.get_nvox()
    1000
    >>> hdr.get_nbyper()
    4
    >>> hdr2 = Nifti1Header(hdr.binaryblock)
    >>> hdr2 == hdr
    True
    """
    template_dtype = header_dtype
    _data_type_codes = data_type_codes
    # fields with recoders for their values
    _field_recoders = {'datatype': data_type_codes,
                       'qform_code': xform_codes,
                       'sform_code': xform_codes,
                       'slice_code': slice_order_codes}

    sizeof_hdr = 348
    # Magics for single and pair
    pair_magic = b'ni1'
    single_magic = b'n+1'
    # Default voxel data offsets for single file; header plus the four byte
    # extension flag
    single_vox_offset = 352

    @classmethod
    def default_structarr(klass):
        """Create empty header binary block"""
        hdr_data = super().default_structarr()
        hdr_data['sizeof_hdr'] = klass.sizeof_hdr
        hdr_data['dim'] = 1
        hdr_data['dim'][0] = 0
        hdr_data['pixdim'] = 1
        hdr_data['datatype'] = 16  # float32
        hdr_data['bitpix'] = 32
        hdr_data['vox_offset'] = klass.single_vox_offset
        hdr_data['scl_slope'] = 1
        hdr_data['magic'] = klass.single_magic
        return hdr_data

    def get_ndim(self):
        """Number of dimensions ``dim[0]``"""
        return int(self._structarr['dim'][0])

    def get_data_shape(self):
        """Get shape of data

        Examples
        --------
        >>> hdr = Nifti1Header()
        >>> hdr.get_data_shape()
        (0,)
        >>> hdr.set_data_shape((1, 2, 3))
        >>> hdr.get_data_shape()
        (1, 2, 3)
        """
        dims = self._structarr['dim']
        ndims = dims[0]
        if ndims == 0:
            return 0,
        return tuple(int(d) for d in dims[1:ndims + 1])

    def set_data_shape(self, shape):
        """Set shape of data

        Extents for dimensions above ``len(shape)`` are set to 1, as are their
        zooms.

        Parameters
        ----------
        shape : sequence
           sequence of 1 to 7 positive integers
        """
        shape = tuple(int(s) for s in shape)
        ndim = len(shape)
        if not 1 <= ndim <= 7:
            raise FormatError(f'shape {shape} must have 1 to 7 dimensions')
        if any(s < 1 for s in shape):
            raise FormatError(f'shape {shape} must have positive extents')
        dims = self._structarr['dim']
        if np.any(np.array(shape) > np.iinfo(dims.dtype).max):
            raise FormatError(f'shape {shape} too large for dim field')
        dims[:] = 1
        dims[0] = ndim
        dims[1:ndim + 1] = shape
        self._structarr['pixdim'][ndim + 1:] = 1.0

    def get_extents(self):
        """Extents ``(nx, ny, nz, nt, nu, nv, nw)``

        Axes beyond ``dim[0]`` have extent 1 whatever the header stores in
        the unused ``dim`` slots.

        >>> hdr = Nifti1Header()
        >>> hdr.set_data_shape((4, 5, 6))
        >>> hdr.get_extents()
        (4, 5, 6, 1, 1, 1, 1)
        """
        ndim = self.get_ndim()
        dims = self._structarr['dim']
        return tuple(int(dims[i]) if i <= ndim else 1 for i in range(1, 8))

    def get_nvox(self):
        """Number of voxels, product of ``dim[1..dim[0]]``"""
        return prod(self.get_data_shape())

    def check_dims(self):
        """Raise FormatError unless ``dim`` describes a non-empty grid

        Runs the ``dim`` check whatever the global error level.
        """
        _, rep = self._chk_dims(self)
        if rep.problem_level:
            raise rep.error(rep.problem_msg)

    def get_nbyper(self):
        """Bytes per voxel from ``bitpix``

        Raises
        ------
        UnsupportedDatatype
            if ``bitpix / 8`` is not one of 2, 4 or 8

        >>> hdr = Nifti1Header()
        >>> hdr['bitpix'] = 24
        >>> hdr.get_nbyper()  #doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
            ...
        UnsupportedDatatype: bitpix 24 gives 3 bytes per voxel; ...
        """
        bitpix = int(self._structarr['bitpix'])
        nbyper = bitpix // 8
        if bitpix % 8 or nbyper not in SUPPORTED_NBYPER:
            raise UnsupportedDatatype(
                f'bitpix {bitpix} gives {bitpix / 8:g} bytes per voxel; '
                f'only {SUPPORTED_NBYPER} are supported')
        return nbyper

    def get_data_dtype(self):
        """Get little-endian numpy dtype for the ``datatype`` code"""
        code = int(self._structarr['datatype'])
        dtype = self._data_type_codes.dtype[code]
        return dtype.newbyteorder(disk_code)

    def set_data_dtype(self, datatype):
        """Set ``datatype`` and ``bitpix`` from code, label or numpy type

        Examples
        --------
        >>> hdr = Nifti1Header()
        >>> hdr.set_data_dtype('int16')
        >>> int(hdr['datatype']), int(hdr['bitpix'])
        (4, 16)
        >>> hdr.set_data_dtype(np.float64)
        >>> hdr.get_nbyper()
        8
        >>> hdr.set_data_dtype('implausible') #doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
           ...
        UnsupportedDatatype: data dtype "implausible" not recognized
        """
        dt = datatype
        if dt not in self._data_type_codes:
            try:
                dt = np.dtype(dt)
            except TypeError:
                raise UnsupportedDatatype(
                    f'data dtype "{datatype}" not recognized')
            if dt not in self._data_type_codes:
                raise UnsupportedDatatype(
                    f'data dtype "{datatype}" not supported')
        code = self._data_type_codes[dt]
        dtype = self._data_type_codes.dtype[code]
        # test for void, being careful of user-defined types
        if dtype.type is np.void and not dtype.fields:
            raise UnsupportedDatatype(
                f'data dtype "{datatype}" known but not supported')
        self._structarr['datatype'] = code
        self._structarr['bitpix'] = dtype.itemsize * 8

    def get_zooms(self):
        """Grid spacings for the ``dim[0]`` used axes

        >>> hdr = Nifti1Header()
        >>> hdr.set_data_shape((1, 2))
        >>> hdr.set_zooms((3, 4))
        >>> hdr.get_zooms()
        (3.0, 4.0)
        """
        ndim = self.get_ndim()
        if ndim == 0:
            return (1.0,)
        return tuple(float(p) for p in self._structarr['pixdim'][1:ndim + 1])

    def set_zooms(self, zooms):
        """Set zooms into ``pixdim[1..dim[0]]``"""
        ndim = self.get_ndim()
        zooms = np.asarray(zooms)
        if len(zooms) != ndim:
            raise FormatError(f'Expecting {ndim} zoom values for ndim {ndim}')
        if np.any(zooms < 0):
            raise FormatError('zooms must be positive')
        self._structarr['pixdim'][1:ndim + 1] = zooms[:]

    def get_spacings(self):
        """Grid spacings ``(dx, dy, dz, dt, du, dv, dw)``, copied from
        ``pixdim[1..7]`` verbatim"""
        return tuple(float(p) for p in self._structarr['pixdim'][1:8])

    def get_data_offset(self):
        """Return offset into file of voxel data

        Raises
        ------
        FormatError
            if ``vox_offset`` is NaN or infinite

        >>> Nifti1Header().get_data_offset()
        352
        """
        offset = float(self._structarr['vox_offset'])
        if not np.isfinite(offset):
            raise FormatError(f'vox_offset {offset} is not a byte offset')
        return int(offset)

    def set_data_offset(self, offset):
        """Set offset into file of voxel data"""
        self._structarr['vox_offset'] = offset

    def get_slope_inter(self):
        """Get data scaling (slope) and intercept from header data

        niivox stores these values but never applies them to samples.

        Returns
        -------
        slope : None or float
           None if there is no valid scaling from these fields
        inter : None or float
           None if there is no valid scaling

        Examples
        --------
        >>> hdr = Nifti1Header()
        >>> hdr.get_slope_inter()
        (1.0, 0.0)
        >>> hdr['scl_slope'] = 0
        >>> hdr.get_slope_inter()
        (None, None)
        """
        slope = float(self['scl_slope'])
        inter = float(self['scl_inter'])
        if slope == 0 or not np.isfinite(slope):
            return None, None
        if not np.isfinite(inter):
            raise FormatError(f'Valid slope but invalid intercept {inter}')
        return slope, inter

    def set_slope_inter(self, slope, inter=0.0):
        """Set slope and intercept into header

        A slope of None is stored as 0, meaning no scaling.
        """
        if slope is None:
            slope, inter = 0.0, 0.0
        if not np.isfinite(slope) or not np.isfinite(inter):
            raise FormatError('Slope and intercept must be finite')
        self._structarr['scl_slope'] = slope
        self._structarr['scl_inter'] = inter

    def get_xyzt_units(self):
        """Labels for spatial and temporal units of ``pixdim``

        >>> hdr = Nifti1Header()
        >>> hdr.set_xyzt_units('mm', 'sec')
        >>> hdr.get_xyzt_units()
        ('mm', 'sec')
        """
        xyz_code = int(self._structarr['xyzt_units']) % 8
        t_code = int(self._structarr['xyzt_units']) - xyz_code
        return (unit_codes.label.get(xyz_code, 'unknown'),
                unit_codes.label.get(t_code, 'unknown'))

    def set_xyzt_units(self, xyz=None, t=None):
        if xyz is None:
            xyz = 0
        if t is None:
            t = 0
        self._structarr['xyzt_units'] = unit_codes[xyz] + unit_codes[t]

    def get_sform(self, coded=False):
        """Return 4x4 affine matrix from sform parameters in header

        Parameters
        ----------
        coded : bool, optional
            If True, return {affine or None}, and sform code.  If False, just
            return affine.  {affine or None} means, return None if sform code
            == 0, and affine otherwise.
        """
        hdr = self._structarr
        code = int(hdr['sform_code'])
        if code == 0 and coded:
            return None, 0
        out = np.eye(4)
        out[0, :] = hdr['srow_x'][:]
        out[1, :] = hdr['srow_y'][:]
        out[2, :] = hdr['srow_z'][:]
        if coded:
            return out, code
        return out

    def get_intent_name(self):
        """Intent name as text"""
        return self._structarr['intent_name'].item().decode('latin-1')

    def get_descrip(self):
        """Free text description as text"""
        return self._structarr['descrip'].item().decode('latin-1')

    @property
    def is_single(self):
        return self._structarr['magic'].item() == self.single_magic

    ''' Checks only below here '''

    @classmethod
    def _get_checks(klass):
        return (klass._chk_sizeof_hdr,
                klass._chk_dims,
                klass._chk_magic,
                klass._chk_offset,
                klass._chk_bitpix)

    @classmethod
    def _chk_sizeof_hdr(klass, hdr, fix=False):
        rep = Report(FormatError)
        sizeof_hdr = hdr['sizeof_hdr']
        if sizeof_hdr == klass.sizeof_hdr:
            return hdr, rep
        if sizeof_hdr.byteswap() == klass.sizeof_hdr:
            rep.problem_level = 40
            rep.problem_msg = 'big-endian NIfTI-1 headers are not supported'
        else:
            rep.problem_level = 30
            rep.problem_msg = f'sizeof_hdr should be {klass.sizeof_hdr}'
        if fix:
            rep.fix_msg = 'leaving as is'
        return hdr, rep

    @staticmethod
    def _chk_dims(hdr, fix=False):
        rep = Report(FormatError)
        dims = hdr['dim']
        ndim = int(dims[0])
        if 1 <= ndim <= 7 and np.all(dims[1:ndim + 1] >= 1):
            return hdr, rep
        rep.problem_level = 40
        if not 1 <= ndim <= 7:
            rep.problem_msg = f'dim[0] (={ndim}) should be in 1..7'
        else:
            rep.problem_msg = (f'dim[1..{ndim}] '
                               f'(={tuple(int(d) for d in dims[1:ndim + 1])})'
                               ' should all be positive')
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @staticmethod
    def _chk_magic(hdr, fix=False):
        rep = Report(FormatError)
        magic = hdr['magic'].item()
        if magic in (hdr.pair_magic, hdr.single_magic):
            return hdr, rep
        rep.problem_msg = f'magic string {magic!r} is not valid'
        rep.problem_level = 30
        if fix:
            rep.fix_msg = 'leaving as is, but future errors are likely'
        return hdr, rep

    @staticmethod
    def _chk_offset(hdr, fix=False):
        rep = Report(FormatError)
        offset = float(hdr['vox_offset'])
        if not np.isfinite(offset):
            rep.problem_msg = f'vox offset {offset} is not finite'
        elif hdr.is_single and offset < hdr.single_vox_offset:
            rep.problem_msg = (f'vox offset {offset:g} too low for '
                               'single file nifti1')
        else:
            return hdr, rep
        rep.problem_level = 40
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @classmethod
    def _chk_bitpix(klass, hdr, fix=False):
        rep = Report(FormatError)
        code = int(hdr['datatype'])
        try:
            dt = klass._data_type_codes.dtype[code]
        except KeyError:
            rep.problem_level = 10
            rep.problem_msg = f'data code {code} not recognized'
            return hdr, rep
        bitpix = dt.itemsize * 8
        if bitpix == hdr['bitpix']:
            return hdr, rep
        rep.problem_level = 10
        rep.problem_msg = 'bitpix does not match datatype'
        if fix:
            rep.fix_msg = 'leaving bitpix as is'
        return hdr, rep
