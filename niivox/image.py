# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""NIfTI-1 single file image with voxel level read / write access

An image holds a :class:`~niivox.nifti1.Nifti1Header`, the bytes between the
end of the header and ``vox_offset`` (kept verbatim, unparsed), and the voxel
payload as a ``bytearray`` of exactly ``nbyper * nvox`` bytes.  Voxels are
stored with the first axis fastest, so that voxel ``(x, y, z, t)`` starts at
byte::

    (t * nx * ny * nz + z * nx * ny + y * nx + x) * nbyper

Creating images::

    img = Nifti1Image.from_filename('func.nii.gz')
    img = Nifti1Image.from_filename('func.nii.gz', read_payload=False)
    img = Nifti1Image.build(64, 64, 30, 100)

Grid dimensions and spacings are read from the header each time they are
asked for; the header is the only place they are stored.  Changing the
``dim``, ``bitpix`` or ``datatype`` fields of ``img.header`` after creation
is not supported, and is caught when the image is saved.
"""
import operator
import os

from .converters import SampleCodec
from .errors import FormatError, ImageDataError, IndexOutOfRange
from .filename_parser import _stringify_path, is_compressed_name
from .nifti1 import Nifti1Header
from .openers import Opener


class Nifti1Image:
    """NIfTI-1 single file image"""

    header_class = Nifti1Header

    def __init__(self, header, payload=None, extra=None):
        """Initialize image from `header` and raw voxel bytes

        Parameters
        ----------
        header : Nifti1Header
            header defining grid shape and voxel datatype.  The image keeps
            this object; it is not copied.
        payload : None or bytes-like, optional
            raw voxel bytes, first axis fastest.  Only the first
            ``nbyper * nvox`` bytes are kept.  None gives a header-only image.
        extra : None or bytes, optional
            bytes between the end of the header and ``vox_offset``.  None
            gives zero bytes up to ``vox_offset``.

        Raises
        ------
        UnsupportedDatatype
            if the header's bytes per voxel is not 2, 4 or 8
        FormatError
            if the header has ``dim[0]`` outside 1..7 or an extent below 1,
            `payload` is shorter than ``nbyper * nvox``, or `extra` does
            not fill the gap up to ``vox_offset``
        """
        header.check_dims()
        self._header = header
        self._codec = SampleCodec.from_header(header)
        gap = header.get_data_offset() - header.sizeof_hdr
        if gap < 0:
            raise FormatError(f'vox_offset {header.get_data_offset()} lies '
                              f'inside the {header.sizeof_hdr} byte header')
        if extra is None:
            extra = b'\x00' * gap
        if len(extra) != gap:
            raise FormatError(f'Expecting {gap} bytes between header and '
                              f'voxel data, got {len(extra)}')
        self._extra = bytes(extra)
        if payload is not None:
            n_bytes = self.nbyper * self.nvox
            if len(payload) < n_bytes:
                raise FormatError(f'Voxel data is {len(payload)} bytes; '
                                  f'header implies {n_bytes}')
            payload = bytearray(payload[:n_bytes])
        self._payload = payload
        self._filename = None

    @classmethod
    def build(klass, nx, ny, nz, nt, dtype='float32'):
        """Make new zero-filled 4D image

        Parameters
        ----------
        nx, ny, nz, nt : int
            grid extents, all positive
        dtype : str or int or numpy type, optional
            voxel datatype; one of uint16, int16, float32, float64

        Returns
        -------
        img : Nifti1Image

        Examples
        --------
        >>> img = Nifti1Image.build(10, 10, 10, 1)
        >>> img.get_dims()
        (10, 10, 10, 1)
        >>> img.nvox, img.nbyper
        (1000, 4)
        """
        shape = tuple(operator.index(n) for n in (nx, ny, nz, nt))
        if any(n < 1 for n in shape):
            raise ValueError(f'Image extents {shape} must all be positive')
        codec = SampleCodec.from_datatype(dtype)
        header = klass.header_class()
        header.set_data_shape(shape)
        header.set_data_dtype(codec.datatype_code)
        n_bytes = codec.nbyper * header.get_nvox()
        return klass(header, bytearray(n_bytes))

    @classmethod
    def from_fileobj(klass, fileobj, read_payload=True):
        """Read image from file-like `fileobj` at its current position"""
        header = klass.header_class.from_fileobj(fileobj)
        # Unsupported datatypes fail before the payload is read
        header.get_nbyper()
        if not read_payload:
            return klass(header)
        gap = max(header.get_data_offset() - header.sizeof_hdr, 0)
        extra = fileobj.read(gap)
        if len(extra) < gap:
            raise FormatError('File ends before voxel data offset '
                              f'{header.get_data_offset()}')
        payload = fileobj.read()
        return klass(header, payload, extra)

    @classmethod
    def from_filename(klass, filename, read_payload=True):
        """Load image from `filename`

        Parameters
        ----------
        filename : str or os.PathLike
            ``.nii`` file, optionally compressed (``.nii.gz``, ``.nii.bz2``)
        read_payload : bool, optional
            If False, read the header only.

        Raises
        ------
        OSError
            if `filename` cannot be opened
        FormatError
            for short headers, corrupt compressed data or truncated payloads
        UnsupportedDatatype
            if bytes per voxel is not 2, 4 or 8
        """
        filename = _stringify_path(filename)
        with Opener(filename) as fileobj:
            img = klass.from_fileobj(fileobj, read_payload)
        img._filename = filename
        return img

    def get_filename(self):
        """Filename image was loaded from, or None"""
        return self._filename

    @property
    def header(self):
        return self._header

    @property
    def codec(self):
        """:class:`SampleCodec` resolved from the header"""
        return self._codec

    @property
    def has_payload(self):
        return self._payload is not None

    @property
    def payload(self):
        """Raw voxel bytes (shared, not copied)"""
        self._check_payload()
        return self._payload

    @property
    def extra(self):
        """Bytes between end of header and ``vox_offset``"""
        return self._extra

    # Dimension model, derived from the header on each access

    @property
    def ndim(self):
        return self._header.get_ndim()

    @property
    def nx(self):
        return self._header.get_extents()[0]

    @property
    def ny(self):
        return self._header.get_extents()[1]

    @property
    def nz(self):
        return self._header.get_extents()[2]

    @property
    def nt(self):
        return self._header.get_extents()[3]

    @property
    def nu(self):
        return self._header.get_extents()[4]

    @property
    def nv(self):
        return self._header.get_extents()[5]

    @property
    def nw(self):
        return self._header.get_extents()[6]

    @property
    def nvox(self):
        return self._header.get_nvox()

    @property
    def nbyper(self):
        return self._codec.nbyper

    @property
    def n_volumes(self):
        """Number of 3D volumes; product of extents of axes 4 to 7"""
        nx, ny, nz = self._header.get_extents()[:3]
        return self.nvox // (nx * ny * nz)

    @property
    def shape(self):
        return self._header.get_data_shape()

    def get_spacings(self):
        """Grid spacings ``(dx, dy, dz, dt, du, dv, dw)``"""
        return self._header.get_spacings()

    def get_dims(self):
        """Return extents ``(nx, ny, nz, nt)``"""
        return self._header.get_extents()[:4]

    # Voxel access

    def _check_payload(self):
        if self._payload is None:
            raise ImageDataError('Image was loaded without voxel data')

    def _check_coord(self, name, value, extent):
        value = operator.index(value)
        if not 0 <= value < extent:
            raise IndexOutOfRange(
                f'{name}={value} outside range [0, {extent}) of image with '
                f'dims {self.get_dims()}')
        return value

    def _linear_index(self, x, y, z, t):
        nx, ny, nz = self._header.get_extents()[:3]
        x = self._check_coord('x', x, nx)
        y = self._check_coord('y', y, ny)
        z = self._check_coord('z', z, nz)
        t = self._check_coord('t', t, self.n_volumes)
        return t * (nx * ny * nz) + z * (nx * ny) + y * nx + x

    def get(self, x, y, z, t=0):
        """Sample at voxel ``(x, y, z, t)`` as ``np.float32``

        >>> img = Nifti1Image.build(10, 10, 10, 1)
        >>> img.set(1, 2, 3, 0, 42.0)
        >>> float(img.get(1, 2, 3, 0))
        42.0
        >>> img.get(10, 0, 0, 0)  #doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
            ...
        IndexOutOfRange: x=10 outside range [0, 10) ...
        """
        self._check_payload()
        offset = self._linear_index(x, y, z, t) * self.nbyper
        return self._codec.decode(self._payload, offset)

    def set(self, x, y, z, t, value):
        """Overwrite voxel ``(x, y, z, t)`` with `value`"""
        self._check_payload()
        offset = self._linear_index(x, y, z, t) * self.nbyper
        self._codec.encode_into(self._payload, offset, value)

    def _dataview(self):
        self._check_payload()
        nx, ny, nz = self._header.get_extents()[:3]
        return self._codec.view(self._payload, (nx, ny, nz, self.n_volumes))

    def get_slice(self, z, t=0):
        """``(nx, ny)`` float32 array of samples at slice `z`, volume `t`"""
        self._check_payload()
        z = self._check_coord('z', z, self.nz)
        t = self._check_coord('t', t, self.n_volumes)
        return self._codec.to_samples(self._dataview()[:, :, z, t])

    def get_time_series(self, x, y, z):
        """float32 array of samples at voxel ``(x, y, z)`` for every volume

        The length is the payload size divided by the size of one volume.
        """
        self._check_payload()
        x = self._check_coord('x', x, self.nx)
        y = self._check_coord('y', y, self.ny)
        z = self._check_coord('z', z, self.nz)
        return self._codec.to_samples(self._dataview()[x, y, z, :])

    def get_fdata(self):
        """float32 copy of all samples, shape ``(nx, ny, nz, n_volumes)``"""
        return self._codec.to_samples(self._dataview())

    # Writing

    def _check_consistent(self):
        hdr = self._header
        hdr.check_dims()
        if SampleCodec.from_header(hdr) is not self._codec:
            raise FormatError('Header datatype changed after image creation')
        if len(self._payload) != self.nbyper * self.nvox:
            raise FormatError('Header dimensions changed after image creation')
        if hdr.sizeof_hdr + len(self._extra) != hdr.get_data_offset():
            raise FormatError('Header vox_offset changed after image creation')

    def to_fileobj(self, fileobj):
        """Write header, extra bytes and voxel data to `fileobj`"""
        self._check_payload()
        self._check_consistent()
        self._header.write_to(fileobj)
        fileobj.write(self._extra)
        fileobj.write(self._payload)

    def to_filename(self, filename, compress=True):
        """Write image to `filename`

        Parameters
        ----------
        filename : str or os.PathLike
            output file name
        compress : bool, optional
            whether to compress the whole file.  The filename must end in a
            compression suffix (``.gz`` or ``.bz2``) if and only if
            `compress` is True, so that the file can be loaded again.

        Raises
        ------
        ValueError
            if `compress` and the filename suffix disagree
        ImageDataError
            if the image was loaded without voxel data
        OSError
            if the file cannot be written.  A partly written file is removed.
        """
        filename = _stringify_path(filename)
        if compress != is_compressed_name(filename):
            raise ValueError(
                f'compress={compress} but filename "{filename}" '
                f'{"lacks" if compress else "has"} a compression suffix')
        self._check_payload()
        self._check_consistent()
        fileobj = Opener(filename, 'wb')
        try:
            with fileobj:
                self.to_fileobj(fileobj)
        except BaseException:
            # Remove the partial file
            os.unlink(filename)
            raise
        self._filename = filename

    def __str__(self):
        return '\n'.join((f'{self.__class__.__name__}',
                          f'dims: {self.get_dims()}',
                          f'codec: {self._codec.name}',
                          'header:',
                          str(self._header)))
