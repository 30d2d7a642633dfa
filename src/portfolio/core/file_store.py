from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_SAFE_SUFFIX = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


@dataclass(slots=True)
class StoredFile:
    file_name: str
    file_url: str
    file_size: int
    path: Path


class LocalFileStore:
    """Writes uploaded media under ``root`` and addresses it by URL path.

    Stored names are random; the caller keeps the original file name in the
    database record.
    """

    def __init__(self, root: Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, category: str, original_name: str, data: bytes) -> StoredFile:
        suffix = Path(original_name).suffix.lower()
        if not _SAFE_SUFFIX.match(suffix):
            suffix = ""
        stored_name = f"{uuid.uuid4().hex}{suffix}"

        directory = self.root / category
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / stored_name
        path.write_bytes(data)
        logger.info("Stored %s (%d bytes) as %s", original_name, len(data), path)

        return StoredFile(
            file_name=original_name,
            file_url=f"{self.url_prefix}/{category}/{stored_name}",
            file_size=len(data),
            path=path,
        )

    def path_for(self, file_url: str) -> Path | None:
        prefix = f"{self.url_prefix}/"
        if not file_url.startswith(prefix):
            return None
        root = self.root.resolve()
        candidate = (root / file_url[len(prefix):]).resolve()
        if root not in candidate.parents:
            return None
        return candidate

    def remove(self, file_url: str) -> bool:
        path = self.path_for(file_url)
        if path is None or not path.is_file():
            return False
        path.unlink()
        logger.info("Removed stored file %s", path)
        return True
