"""Persist upload entries to their templated destinations."""

import os
from collections.abc import Callable
from datetime import datetime

from uploadfiles.core.errors import DestinationExistsError, WriteFailure
from uploadfiles.core.logger import LogIcon, logger
from uploadfiles.models.core import FileEntry, UploadConfig
from uploadfiles.services.template import destination_for, ensure_parent
from uploadfiles.services.upload_set import UploadSet

Clock = Callable[[], datetime]


def write_file(entry: FileEntry, config: UploadConfig, now: datetime) -> str:
    """Write one entry and return its destination path.

    With overwrite disabled an existing path raises DestinationExistsError and is left
    untouched. The existence check and the write are not atomic: a concurrent
    request writing the same path between the two can still be replaced.
    """
    data = entry.read()

    path = destination_for(entry, config.destination, now)
    if config.destination:
        ensure_parent(path)

    if not config.overwrite and os.path.lexists(path):
        raise DestinationExistsError(path)

    with open(path, "wb") as file_handle:
        file_handle.write(data)
    os.chmod(path, config.perm)

    logger.info("File written", icon=LogIcon.FILE, field=entry.field, path=path, size=len(data))
    return path


def write_all(upload_set: UploadSet, config: UploadConfig, clock: Clock = datetime.now) -> list[str]:
    """Write every entry in field order, stopping at the first failure.

    Entries written before a failure stay on disk.
    """
    written: list[str] = []
    for name, entries in upload_set:
        for entry in entries:
            try:
                written.append(write_file(entry, config, clock()))
            except OSError as ex:
                logger.error("Upload write failed", icon=LogIcon.ERROR, field=name, detail=str(ex))
                raise WriteFailure(name, ex) from ex

    logger.info("Upload set written", icon=LogIcon.SUCCESS, count=len(written))
    return written
