"""Core models for multipart parts and encoder lifecycle."""

from enum import StrEnum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from formdata.core.errors import InvalidPartError

# Characters that would end a header line or a quoted parameter early.
UNSAFE_PARAM_CHARS = frozenset('"\r\n')
UNSAFE_HEADER_CHARS = frozenset("\r\n")


class FormState(StrEnum):
    """Lifecycle of a multipart document."""

    OPEN = "open"
    CLOSED = "closed"


@runtime_checkable
class Writable(Protocol):
    """Append-only byte sink."""

    def write(self, data: bytes, /) -> object: ...


@runtime_checkable
class Readable(Protocol):
    """Binary source read to exhaustion."""

    def read(self, size: int = -1, /) -> bytes: ...


def _check_param(value: str | None) -> str | None:
    if value is not None and UNSAFE_PARAM_CHARS.intersection(value):
        raise ValueError(f"{value!r} cannot be embedded in a quoted header parameter")
    return value


class PartModel(BaseModel):
    """Base for part models; construction failures raise InvalidPartError."""

    def __init__(self, **data) -> None:
        try:
            super().__init__(**data)
        except ValidationError as ex:
            raise InvalidPartError(str(ex)) from ex


class PartHeaders(PartModel):
    """Header block of a single part."""

    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    filename: str | None = None
    content_type: str | None = None

    @field_validator("name", "filename")
    @classmethod
    def quoted_param_is_safe(cls, value: str | None) -> str | None:
        return _check_param(value)

    @field_validator("content_type")
    @classmethod
    def header_line_is_safe(cls, value: str | None) -> str | None:
        if value is not None and UNSAFE_HEADER_CHARS.intersection(value):
            raise ValueError(f"{value!r} cannot be embedded in a header line")
        return value

    def encode(self, encoding: str) -> bytes:
        """Render the header lines and the blank separator."""
        disposition = f'Content-Disposition: form-data; name="{self.name}"'
        if self.filename is not None:
            disposition += f'; filename="{self.filename}"'
        lines = [disposition]
        if self.content_type is not None:
            lines.append(f"Content-Type: {self.content_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode(encoding)


class Field(PartModel):
    """A simple named text value."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: bytes

    @field_validator("name")
    @classmethod
    def name_is_safe(cls, value: str) -> str:
        return _check_param(value)


class FilePart(PartModel):
    """A named value with file semantics, held in memory."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes
    content_type: str
    filename: str | None = None

    @field_validator("name", "filename")
    @classmethod
    def param_is_safe(cls, value: str | None) -> str | None:
        return _check_param(value)
