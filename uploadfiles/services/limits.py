"""Limit checks over an upload set.

Both checks are pure and report at most one violation, in this order:
size (aggregate or per-file), duplicate filename, file count.
"""

from uploadfiles.core.errors import (
    AggregateSizeExceeded,
    CountExceeded,
    DuplicateFilename,
    PerFileSizeExceeded,
    ViolationError,
)
from uploadfiles.core.logger import LogIcon, logger
from uploadfiles.models.core import UploadConfig
from uploadfiles.services.upload_set import UploadSet


def _report(violation: ViolationError | None, icon: LogIcon) -> ViolationError | None:
    if violation is not None:
        logger.warning("Upload limit violated", icon=icon, kind=violation.kind.value, detail=str(violation))
    return violation


def check_count(upload_set: UploadSet, config: UploadConfig) -> CountExceeded | None:
    count = upload_set.count
    if config.max_files and count > config.max_files:
        return CountExceeded(count=count, limit=config.max_files)
    return None


def check_duplicates(upload_set: UploadSet) -> DuplicateFilename | None:
    for filename in upload_set.duplicates:
        return DuplicateFilename(filename=filename)
    return None


def _check_tail(upload_set: UploadSet, config: UploadConfig) -> ViolationError | None:
    if violation := check_duplicates(upload_set):
        return _report(violation, LogIcon.DUPLICATE)
    return _report(check_count(upload_set, config), LogIcon.FORBIDDEN)


def check_aggregate(upload_set: UploadSet, config: UploadConfig) -> ViolationError | None:
    """Check the summed size of every entry, then duplicates, then the file count."""
    total = upload_set.size
    if config.max_total_size and total > config.max_total_size:
        return _report(AggregateSizeExceeded(size=total, limit=config.max_total_size), LogIcon.OVERSIZE)
    return _check_tail(upload_set, config)


def check_per_file(upload_set: UploadSet, config: UploadConfig) -> ViolationError | None:
    """Check each entry's size in field order, then duplicates, then the file count."""
    if config.max_file_size:
        for name, entries in upload_set:
            for entry in entries:
                if entry.size > config.max_file_size:
                    violation = PerFileSizeExceeded(
                        field=name,
                        filename=entry.filename,
                        size=entry.size,
                        limit=config.max_file_size,
                        header=entry.header,
                    )
                    return _report(violation, LogIcon.OVERSIZE)
    return _check_tail(upload_set, config)
