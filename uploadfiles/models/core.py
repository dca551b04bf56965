"""Upload configuration and file entry models."""

from collections.abc import Callable, Generator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field

from uploadfiles.core.settings import Settings


class UploadConfig(BaseModel):
    """Limits, destination template and write policy for one upload request.

    Every limit uses 0 to mean unlimited.
    """

    model_config = ConfigDict(frozen=True)

    destination: str = ""
    max_total_size: int = Field(default=0, ge=0)
    max_file_size: int = Field(default=0, ge=0)
    max_files: int = Field(default=0, ge=0)
    perm: int = Field(default=0o644, ge=0, le=0o7777)
    overwrite: bool = False
    unique: bool = False

    @classmethod
    def from_settings(cls, st: Settings) -> "UploadConfig":
        return cls(
            destination=st.UPLOAD_DESTINATION,
            max_total_size=st.UPLOAD_MAX_TOTAL_SIZE,
            max_file_size=st.UPLOAD_MAX_FILE_SIZE,
            max_files=st.UPLOAD_MAX_FILES,
            perm=st.UPLOAD_PERM,
            overwrite=st.UPLOAD_OVERWRITE,
            unique=st.UPLOAD_UNIQUE,
        )


@dataclass(frozen=True, slots=True)
class RawFileDescriptor:
    """A decoded multipart file as handed over by the body parser."""

    filename: str
    size: int
    opener: Callable[[], BinaryIO]
    header: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class FileEntry:
    """An uploaded file under its form field name."""

    field: str
    descriptor: RawFileDescriptor

    @property
    def filename(self) -> str:
        return self.descriptor.filename

    @property
    def size(self) -> int:
        return self.descriptor.size

    @property
    def header(self) -> Mapping[str, str]:
        return self.descriptor.header

    @contextmanager
    def open(self) -> Generator[BinaryIO, None, None]:
        """Open the content stream, closing it on every exit path."""
        stream = self.descriptor.opener()
        try:
            yield stream
        finally:
            stream.close()

    def read(self) -> bytes:
        with self.open() as stream:
            return stream.read()
