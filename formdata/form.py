"""Incremental ``multipart/form-data`` (RFC 7578) document builder."""

import io
import os
import time
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generic, TypeVar

from beartype import beartype

from formdata.core.boundary import Clock, RandomSource, generate_boundary, validate_boundary
from formdata.core.errors import FormFinishedError
from formdata.core.logger import LogIcon, logger
from formdata.core.settings import settings as st
from formdata.models.core import Field, FilePart, FormState, PartHeaders, Readable, Writable

W = TypeVar("W", bound=Writable)

CRLF = b"\r\n"

ByteData = bytes | bytearray | memoryview


def write_all(writer: Writable, data: ByteData) -> None:
    """Write every byte of ``data``, looping over short writes.

    Raises:
        OSError: if the writer accepts nothing. A raw writer returning ``None``
            would block, which counts as accepting nothing.
    """
    view = memoryview(data).cast("B")
    while view:
        written = writer.write(view)
        if written is None:
            if isinstance(writer, io.RawIOBase):
                raise BlockingIOError(0, "writer would block", 0)
            return
        if written == 0:
            raise OSError("writer accepted no bytes")
        view = view[written:]


class FormData(Generic[W]):
    """``multipart/form-data`` document builder writing straight to ``writer``.

    The writer is owned by the form until :meth:`finish` hands it back. Parts
    appear on the wire in the order they are written.

    Example::

        form = FormData(io.BytesIO())
        headers = {"Content-Type": form.content_type_header()}
        form.write_path("ferris", "rustacean.png", "image/png")
        form.write_field("cute", "yes")
        body = form.finish().getvalue()
    """

    def __init__(
        self,
        writer: W,
        *,
        boundary: str | None = None,
        random_source: RandomSource = os.urandom,
        clock: Clock = time.time_ns,
    ) -> None:
        self._writer: W | None = writer
        self._boundary = (
            validate_boundary(boundary) if boundary is not None else generate_boundary(random_source, clock)
        )
        self._encoding = st.HEADER_ENCODING
        logger.debug("Form started", icon=LogIcon.START, boundary=self._boundary)

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def state(self) -> FormState:
        return FormState.OPEN if self._writer is not None else FormState.CLOSED

    def content_type_header(self) -> str:
        """Return the value of the ``Content-Type`` header that matches the document."""
        return f"multipart/form-data; boundary={self._boundary}"

    def finish(self) -> W:
        """Write the closing delimiter and return the writer.

        Raises:
            FormFinishedError: if the form was already finished.
        """
        writer = self._take_writer("you can only finish once")
        write_all(writer, f"--{self._boundary}--".encode("ascii") + CRLF)
        logger.debug("Form finished", icon=LogIcon.COMPLETE)
        return writer

    def _take_writer(self, message: str) -> W:
        if self._writer is None:
            raise FormFinishedError(message)
        writer, self._writer = self._writer, None
        return writer

    def _open_writer(self) -> W:
        if self._writer is None:
            raise FormFinishedError("this method cannot be used after using finish()")
        return self._writer

    def _headers(self, name: str, filename: str | None = None, content_type: str | None = None) -> bytes:
        return PartHeaders(name=name, filename=filename, content_type=content_type).encode(self._encoding)

    def _write_header(self, name: str, filename: str | None = None, content_type: str | None = None) -> W:
        # Headers are validated before any byte of the part is written.
        writer = self._open_writer()
        header = self._headers(name, filename, content_type)
        write_all(writer, f"--{self._boundary}".encode("ascii") + CRLF + header)
        return writer

    @beartype
    def write_field(self, name: str, value: str | ByteData) -> None:
        """Write a non-file field to the document.

        A ``str`` value is encoded as UTF-8.
        """
        if isinstance(value, str):
            value = value.encode("utf-8")
        writer = self._write_header(name)
        write_all(writer, value)
        write_all(writer, CRLF)
        logger.debug("Field written", icon=LogIcon.FIELD, name=name, size=memoryview(value).nbytes)

    @beartype
    def write_file(self, name: str, reader: Readable, filename: str | None, content_type: str) -> None:
        """Write a file field to the document, copying the data from ``reader``.

        RFC 7578 section 4.2 advises that a file name SHOULD be supplied, but it
        may be omitted (``None``) when unavailable, meaningless or private.
        """
        writer = self._write_header(name, filename, content_type)
        size = 0
        while chunk := reader.read(st.CHUNK_SIZE):
            write_all(writer, chunk)
            size += len(chunk)
        write_all(writer, CRLF)
        logger.debug("File written", icon=LogIcon.FILE, name=name, file_name=filename, size=size)

    @beartype
    def write_bytes(self, name: str, data: ByteData, filename: str | None, content_type: str) -> None:
        """Write a file field whose content is already in memory."""
        writer = self._write_header(name, filename, content_type)
        write_all(writer, data)
        write_all(writer, CRLF)
        logger.debug("File written", icon=LogIcon.FILE, name=name, file_name=filename, size=memoryview(data).nbytes)

    @beartype
    def write_path(self, name: str, path: str | os.PathLike, content_type: str) -> None:
        """Write a file field, opening the file at ``path`` and copying its data.

        The ``filename`` parameter is taken from the last component of ``path``.
        Use :meth:`write_file` to choose it yourself.
        """
        self._open_writer()
        source = Path(path)
        with source.open("rb") as file_handle:
            self.write_file(name, file_handle, source.name, content_type)

    def write_part(self, part: Field | FilePart) -> None:
        """Write a part described by a :class:`Field` or :class:`FilePart` model."""
        match part:
            case Field():
                self.write_field(part.name, part.value)
            case FilePart():
                self.write_bytes(part.name, part.content, part.filename, part.content_type)
            case _:
                raise TypeError(f"Unsupported part type: {type(part).__name__}")


@contextmanager
def open_form(writer: W, **kwargs: Any) -> Generator[FormData[W], None, None]:
    """Context manager that finishes the form when the block exits cleanly.

    If the block raises, no closing delimiter is written.
    """
    form = FormData(writer, **kwargs)
    yield form
    form.finish()
