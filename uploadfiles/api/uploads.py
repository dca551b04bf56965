"""Multipart upload endpoint."""

import asyncio
from collections.abc import Callable
from datetime import datetime

from robyn import Response, status_codes

from uploadfiles.core.errors import WriteFailure
from uploadfiles.core.logger import LogIcon, logger
from uploadfiles.core.router import Router, json_response, violation_response, write_failure_response
from uploadfiles.core.settings import settings as st
from uploadfiles.models.core import UploadConfig
from uploadfiles.services.limits import check_aggregate, check_per_file
from uploadfiles.services.upload_set import UploadSet
from uploadfiles.services.writer import write_all

upload_config = UploadConfig.from_settings(st)
router = Router(__file__, prefix="/files", upload_config=upload_config)


async def process_upload(
    files: UploadSet,
    config: UploadConfig,
    clock: Callable[[], datetime] = datetime.now,
) -> Response | dict:
    """Validate an upload set against both limit checks and persist it."""
    if not files:
        return json_response(status_codes.HTTP_422_UNPROCESSABLE_ENTITY, {"error": "missing_files"})

    if violation := check_per_file(files, config) or check_aggregate(files, config):
        return violation_response(violation)

    try:
        paths = await asyncio.to_thread(write_all, files, config, clock)
    except WriteFailure as failure:
        return write_failure_response(failure)

    entries = [entry for _, field_entries in files for entry in field_entries]
    logger.info("Upload accepted", icon=LogIcon.COMPLETE, count=len(paths))
    return {
        "files": [
            {"field": entry.field, "filename": entry.filename, "size": entry.size, "path": path}
            for entry, path in zip(entries, paths, strict=True)
        ]
    }


@router.post("/upload")
async def upload(files: UploadSet):
    """Validate and save the uploaded files."""
    return await process_upload(files, router.upload_config)
