"""Deduplicated, field-grouped view of the files of one multipart request."""

from collections.abc import Iterator, Mapping, Sequence

from beartype import beartype

from uploadfiles.core.logger import LogIcon, logger
from uploadfiles.models.core import FileEntry, RawFileDescriptor, UploadConfig

RawFields = Mapping[str, Sequence[RawFileDescriptor]]


class UploadSet:
    """Files of one request grouped by field name, in submission order.

    With uniqueness enabled, the first occurrence of a filename anywhere in the
    request is kept and later ones are only recorded in ``duplicates``.
    """

    __slots__ = ("_files", "_duplicates")

    def __init__(
        self,
        files: dict[str, list[FileEntry]] | None = None,
        duplicates: Sequence[str] = (),
    ) -> None:
        self._files = files or {}
        self._duplicates = tuple(duplicates)

    def __bool__(self) -> bool:
        return self.count > 0

    def __iter__(self) -> Iterator[tuple[str, list[FileEntry]]]:
        return iter(self._files.items())

    def __repr__(self) -> str:
        return f"UploadSet(count={self.count}, size={self.size}, duplicates={list(self._duplicates)})"

    @property
    def files(self) -> Mapping[str, list[FileEntry]]:
        return self._files

    @property
    def duplicates(self) -> tuple[str, ...]:
        """Filenames dropped as duplicates, in the order first seen."""
        return self._duplicates

    @property
    def count(self) -> int:
        return sum(len(entries) for entries in self._files.values())

    @property
    def size(self) -> int:
        """Sum of declared sizes of every kept entry."""
        return sum(entry.size for entries in self._files.values() for entry in entries)

    def keys(self) -> list[str]:
        return list(self._files.keys())

    def entries(self, name: str) -> list[FileEntry]:
        """All entries submitted under a field name."""
        return self._files.get(name, [])

    def get(self, name: str) -> FileEntry | None:
        """First entry submitted under a field name."""
        entries = self.entries(name)
        return entries[0] if entries else None

    def descriptors(self) -> dict[str, list[RawFileDescriptor]]:
        return {name: [entry.descriptor for entry in entries] for name, entries in self._files.items()}


@beartype
def build_upload_set(fields: RawFields | None, config: UploadConfig) -> UploadSet:
    """Group decoded multipart files by field, dropping repeated filenames when configured.

    Only metadata is copied; no content stream is opened. A request whose body
    has not been parsed (``None`` or empty fields) yields an empty set.
    """
    if not fields:
        return UploadSet()

    files: dict[str, list[FileEntry]] = {}
    seen: set[str] = set()
    duplicates: dict[str, None] = {}

    for name, descriptors in fields.items():
        if not descriptors:
            continue
        kept: list[FileEntry] = []
        for descriptor in descriptors:
            if config.unique:
                if descriptor.filename in seen:
                    duplicates.setdefault(descriptor.filename, None)
                    continue
                seen.add(descriptor.filename)
            kept.append(FileEntry(field=name, descriptor=descriptor))
        files[name] = kept

    upload_set = UploadSet(files, duplicates)
    logger.info(
        "Upload set built",
        icon=LogIcon.UPLOAD,
        fields=len(files),
        count=upload_set.count,
        size=upload_set.size,
        duplicates=len(duplicates),
    )
    return upload_set
