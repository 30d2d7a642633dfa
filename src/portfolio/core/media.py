from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.orm import Session

from portfolio.config import get_settings
from portfolio.core.file_store import LocalFileStore
from portfolio.db.errors import NotFoundError, PersistenceError
from portfolio.db.models import ResumeUpload, Video
from portfolio.db.repositories import Repository

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class InvalidUploadError(ValueError):
    pass


class UploadTooLargeError(InvalidUploadError):
    pass


@dataclass(slots=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes


def get_file_store() -> LocalFileStore:
    return LocalFileStore(get_settings().upload_dir)


class MediaLibrary:
    """Upload handling for resumes and introduction videos.

    Bytes go to the file store first; the database row is written only after
    the file is on disk, and the file is removed again if the row cannot be
    written.
    """

    def __init__(self, session: Session, store: LocalFileStore | None = None):
        self.settings = get_settings()
        self.repo = Repository(session)
        self.store = store or get_file_store()

    def _check(self, upload: UploadedFile, *, allowed: set[str], max_bytes: int, kind: str) -> None:
        if upload.content_type not in allowed:
            raise InvalidUploadError(f"unsupported {kind} type '{upload.content_type}'")
        if not upload.data:
            raise InvalidUploadError(f"empty {kind} upload")
        if len(upload.data) > max_bytes:
            raise UploadTooLargeError(f"{kind} exceeds {max_bytes // (1024 * 1024)}MB limit")

    def upload_resume(
        self,
        *,
        user_id: str,
        upload: UploadedFile,
        description: str | None = None,
        activate: bool = True,
    ) -> ResumeUpload:
        self._check(
            upload,
            allowed={PDF_CONTENT_TYPE},
            max_bytes=self.settings.max_resume_bytes,
            kind="resume",
        )
        if self.repo.get_user(user_id) is None:
            raise NotFoundError(f"user {user_id} not found")

        stored = self.store.save("resumes", upload.filename, upload.data)
        try:
            return self.repo.create_resume_upload(
                user_id=user_id,
                file_name=stored.file_name,
                file_url=stored.file_url,
                file_size=stored.file_size,
                description=description,
                activate=activate,
            )
        except PersistenceError:
            self.store.remove(stored.file_url)
            raise

    def upload_video(
        self,
        *,
        upload: UploadedFile,
        title: str | None = None,
        uploaded_by: str | None = None,
        activate: bool = True,
    ) -> Video:
        self._check(
            upload,
            allowed=self.settings.allowed_video_type_set,
            max_bytes=self.settings.max_video_bytes,
            kind="video",
        )
        stored = self.store.save("videos", upload.filename, upload.data)
        try:
            return self.repo.create_video(
                title=title,
                file_name=stored.file_name,
                file_url=stored.file_url,
                file_size=stored.file_size,
                uploaded_by=uploaded_by,
                activate=activate,
            )
        except PersistenceError:
            self.store.remove(stored.file_url)
            raise

    def delete_resume(self, resume_id: str, user_id: str) -> ResumeUpload:
        record = self.repo.delete_resume_upload(resume_id, user_id)
        self.store.remove(record.file_url)
        return record

    def delete_video(self, video_id: str) -> Video:
        record = self.repo.delete_video(video_id)
        self.store.remove(record.file_url)
        return record

    def _local_path(self, record: ResumeUpload | Video) -> Path:
        path = self.store.path_for(record.file_url)
        if path is None or not path.is_file():
            logger.warning("File for %s %s is missing at %s", type(record).__name__, record.id, record.file_url)
            raise NotFoundError(f"file for {record.id} is missing")
        return path

    def active_resume_file(self, user_id: str) -> tuple[ResumeUpload, Path]:
        record = self.repo.get_active_resume(user_id)
        if record is None:
            raise NotFoundError(f"no active resume for user {user_id}")
        return record, self._local_path(record)

    def active_video_file(self) -> tuple[Video, Path]:
        record = self.repo.get_active_video()
        if record is None:
            raise NotFoundError("no active video")
        return record, self._local_path(record)
