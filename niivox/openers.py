# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Context manager opener for plain and compressed image files"""

from __future__ import annotations

import bz2
import gzip
import io
import typing as ty
import zlib

from .errors import FormatError
from .filename_parser import _stringify_path, compression_suffix

if ty.TYPE_CHECKING:
    from types import TracebackType

# Errors from reading a corrupt or truncated compressed stream
COMPRESSION_ERRORS: tuple[type[BaseException], ...] = (
    OSError,  # gzip.BadGzipFile, bz2 invalid data
    EOFError,  # stream ends before its end marker
    zlib.error,
)


@ty.runtime_checkable
class Fileish(ty.Protocol):
    def read(self, size: int = -1, /) -> bytes: ...
    def write(self, b: bytes, /) -> int | None: ...


class Opener:
    r"""Accept, maybe open, and context-manage file-likes / filenames

    Filenames ending in ``.gz`` or ``.bz2`` (any case) are read through a
    decompressing stream, and written through a compressing one; other
    filenames give a plain binary file.  Gzip output carries no file name
    and a zero modification time, so that equal content gives equal files.

    Parameters
    ----------
    fileish : str, os.PathLike or file-like
        path to open, or an open file-like, which is used as is and never
        closed by the opener
    mode : {'rb', 'wb'}, optional
        mode for opening a path
    compresslevel : None or int, optional
        compression level when writing a compressed path.  None gives
        ``default_compresslevel``.

    Raises
    ------
    OSError
        if the path cannot be opened
    """

    #: default compression level when writing gz and bz2 files
    default_compresslevel = 1

    def __init__(self, fileish, mode='rb', compresslevel=None):
        self._raw = None
        if isinstance(fileish, (io.IOBase, Fileish)):
            self.fobj = fileish
            self.me_opened = False
            self._name = getattr(fileish, 'name', None)
            return
        filename = _stringify_path(fileish)
        if compresslevel is None:
            compresslevel = self.default_compresslevel
        suffix = compression_suffix(filename)
        if suffix == '.gz':
            self._raw = open(filename, mode)
            try:
                self.fobj = gzip.GzipFile(filename='', mode=mode,
                                          compresslevel=compresslevel,
                                          fileobj=self._raw, mtime=0)
            except BaseException:
                self._raw.close()
                raise
        elif suffix == '.bz2':
            self.fobj = bz2.BZ2File(filename, mode, compresslevel=compresslevel)
        else:
            self.fobj = open(filename, mode)
        self._name = filename
        self.me_opened = True

    @property
    def closed(self) -> bool:
        return self.fobj.closed

    @property
    def name(self) -> str | None:
        """Filename opened, or the ``name`` of a passed file-like, or None"""
        return self._name

    @property
    def is_compressed(self) -> bool:
        """True if reads and writes go through a (de)compressing stream"""
        return isinstance(self.fobj, (gzip.GzipFile, bz2.BZ2File))

    def read(self, size: int = -1, /) -> bytes:
        """Read up to `size` bytes, all remaining bytes for ``size=-1``

        Raises
        ------
        FormatError
            if the compressed stream is corrupt or truncated
        """
        if not self.is_compressed:
            return self.fobj.read(size)
        try:
            return self.fobj.read(size)
        except COMPRESSION_ERRORS as err:
            raise FormatError(
                f'Cannot decompress {self.name or "stream"}: {err}') from err

    def write(self, b: bytes, /) -> int | None:
        return self.fobj.write(b)

    def close(self) -> None:
        try:
            self.fobj.close()
        finally:
            if self._raw is not None:
                self._raw.close()

    def close_if_mine(self) -> None:
        """Close the file iff we opened it in the constructor"""
        if self.me_opened:
            self.close()

    def __enter__(self) -> Opener:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close_if_mine()
