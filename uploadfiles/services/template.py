"""Destination path templating for saved uploads.

Placeholders: %Y %y %m %d %H %M %S (timestamp), %f (original filename) and
%g (MD5 hex of filename followed by the decimal size). All are expanded in a
single pass, so an expansion is never scanned for further placeholders.
"""

import hashlib
import os
import re
from datetime import datetime
from pathlib import Path

from beartype import beartype

from uploadfiles.core.logger import LogIcon, logger
from uploadfiles.models.core import FileEntry

PLACEHOLDER = re.compile(r"%[YymdHMSfg]")
DIRECTORY_MODE = 0o755


def content_token(filename: str, size: int) -> str:
    """Short deterministic token for a file; not a security primitive."""
    return hashlib.md5(f"{filename}{size}".encode()).hexdigest()


@beartype
def expand(template: str, now: datetime, filename: str, size: int) -> str:
    """Expand a destination template; an empty template means the filename itself."""
    if not template:
        return filename

    year = f"{now.year:04d}"
    values = {
        "%Y": year,
        "%y": year[-2:],
        "%m": f"{now.month:02d}",
        "%d": f"{now.day:02d}",
        "%H": f"{now.hour:02d}",
        "%M": f"{now.minute:02d}",
        "%S": f"{now.second:02d}",
        "%f": filename,
        "%g": content_token(filename, size),
    }
    return PLACEHOLDER.sub(lambda match: values[match.group()], template)


def destination_for(entry: FileEntry, template: str, now: datetime) -> str:
    return expand(template, now, entry.filename, entry.size)


def ensure_parent(path: str) -> None:
    """Create the missing directories above ``path``."""
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        Path(parent).mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        logger.info("Created upload directory", icon=LogIcon.FOLDER, path=parent)
