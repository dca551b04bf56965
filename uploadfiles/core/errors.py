"""Limit violations and write failures raised or reported by the upload core."""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any


class ViolationKind(StrEnum):
    """Discriminant for the four limit violations."""

    COUNT_EXCEEDED = "count_exceeded"
    AGGREGATE_SIZE_EXCEEDED = "aggregate_size_exceeded"
    PER_FILE_SIZE_EXCEEDED = "per_file_size_exceeded"
    DUPLICATE_FILENAME = "duplicate_filename"


class ViolationError(Exception):
    """Base class for a breach of a configured upload limit.

    Violations are returned by the limit checks, not raised; callers decide
    how to answer. Only the four subclasses below are ever produced.
    """

    kind: ViolationKind

    def to_dict(self) -> dict[str, Any]:
        """Serializable view used for JSON responses."""
        return {"error": self.kind.value, "detail": str(self)}


class CountExceeded(ViolationError):
    kind = ViolationKind.COUNT_EXCEEDED

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(f"payload too large file. upload file num [{count} > maxnum({limit})]")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "count": self.count, "limit": self.limit}


class AggregateSizeExceeded(ViolationError):
    kind = ViolationKind.AGGREGATE_SIZE_EXCEEDED

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"payload too large file. all upload file sum size [{size} > max({limit} bytes)]")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "size": self.size, "limit": self.limit}


class PerFileSizeExceeded(ViolationError):
    kind = ViolationKind.PER_FILE_SIZE_EXCEEDED

    def __init__(self, field: str, filename: str, size: int, limit: int, header: Mapping[str, str]) -> None:
        self.field = field
        self.filename = filename
        self.size = size
        self.limit = limit
        self.header = dict(header)
        super().__init__(
            f"payload too large file. '{field}' = [{filename}({size} bytes) > max({limit} bytes)]"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "field": self.field,
            "filename": self.filename,
            "size": self.size,
            "limit": self.limit,
        }


class DuplicateFilename(ViolationError):
    kind = ViolationKind.DUPLICATE_FILENAME

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"payload too large file. '{filename}' is duplicate")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "filename": self.filename}


class DestinationExistsError(FileExistsError):
    """The destination path is taken and overwrite is disabled."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"'{path}' is already exists")


class WriteFailure(Exception):
    """Persisting an entry failed; wraps the I/O cause and the originating field."""

    def __init__(self, field: str, cause: BaseException) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"{field}: {cause}")

    @property
    def already_exists(self) -> bool:
        """True only when overwrite was disabled and the destination was taken."""
        return isinstance(self.cause, DestinationExistsError)
