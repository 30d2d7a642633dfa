from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from portfolio.db.active_record import ActiveRecordSelector
from portfolio.db.errors import NotFoundError, storage_guard
from portfolio.db.models import ContactMessage, ResumeUpload, SqlQuery, User, Video

logger = logging.getLogger(__name__)


class Repository:
    def __init__(self, session: Session):
        self.session = session
        self.resumes: ActiveRecordSelector[ResumeUpload] = ActiveRecordSelector(
            session, ResumeUpload, scope_column="user_id", order_column="uploaded_at"
        )
        self.videos: ActiveRecordSelector[Video] = ActiveRecordSelector(session, Video)

    def get_user(self, user_id: str) -> User | None:
        with storage_guard(self.session, "get_user"):
            return self.session.get(User, user_id)

    def upsert_user(self, user_id: str, values: dict) -> User:
        with storage_guard(self.session, "upsert_user"):
            existing = self.session.get(User, user_id)
            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                obj = existing
            else:
                obj = User(id=user_id, **values)
                self.session.add(obj)

            self.session.commit()
            self.session.refresh(obj)
        return obj

    def delete_user(self, user_id: str) -> None:
        """Remove a user; the foreign key takes its resume uploads with it."""
        with storage_guard(self.session, "delete_user"):
            result = self.session.execute(delete(User).where(User.id == user_id))
            if result.rowcount == 0:
                raise NotFoundError(f"user {user_id} not found")
            self.session.commit()
        logger.info("Deleted user %s", user_id)

    def create_contact_message(self, *, name: str, email: str, message: str, subject: str = "") -> ContactMessage:
        item = ContactMessage(name=name, email=email, subject=subject, message=message)
        with storage_guard(self.session, "create_contact_message"):
            self.session.add(item)
            self.session.commit()
            self.session.refresh(item)
        return item

    def list_contact_messages(self) -> list[ContactMessage]:
        statement = select(ContactMessage).order_by(ContactMessage.id.asc())
        with storage_guard(self.session, "list_contact_messages"):
            return list(self.session.scalars(statement).all())

    def create_sql_query(self, query: str) -> SqlQuery:
        item = SqlQuery(query=query)
        with storage_guard(self.session, "create_sql_query"):
            self.session.add(item)
            self.session.commit()
            self.session.refresh(item)
        return item

    def list_sql_queries(self) -> list[SqlQuery]:
        statement = select(SqlQuery).order_by(SqlQuery.id.asc())
        with storage_guard(self.session, "list_sql_queries"):
            return list(self.session.scalars(statement).all())

    def create_resume_upload(
        self,
        *,
        user_id: str,
        file_name: str,
        file_url: str,
        file_size: int,
        description: str | None = None,
        activate: bool = False,
    ) -> ResumeUpload:
        record = ResumeUpload(
            user_id=user_id,
            file_name=file_name,
            file_url=file_url,
            file_size=file_size,
            description=description,
        )
        return self.resumes.create(record, activate=activate)

    def list_resume_uploads(self, user_id: str) -> list[ResumeUpload]:
        return self.resumes.list(user_id)

    def get_resume_upload(self, resume_id: str, user_id: str) -> ResumeUpload | None:
        return self.resumes.get(user_id, resume_id)

    def get_active_resume(self, user_id: str) -> ResumeUpload | None:
        return self.resumes.get_active(user_id)

    def set_active_resume(self, resume_id: str, user_id: str) -> ResumeUpload:
        return self.resumes.set_active(user_id, resume_id)

    def delete_resume_upload(self, resume_id: str, user_id: str) -> ResumeUpload:
        return self.resumes.delete(user_id, resume_id)

    def create_video(
        self,
        *,
        file_name: str,
        file_url: str,
        file_size: int = 0,
        title: str | None = None,
        uploaded_by: str | None = None,
        activate: bool = False,
    ) -> Video:
        record = Video(
            title=title,
            file_name=file_name,
            file_url=file_url,
            file_size=file_size,
            uploaded_by=uploaded_by,
        )
        return self.videos.create(record, activate=activate)

    def list_videos(self) -> list[Video]:
        return self.videos.list()

    def get_video(self, video_id: str) -> Video | None:
        return self.videos.get(None, video_id)

    def get_active_video(self) -> Video | None:
        return self.videos.get_active()

    def set_active_video(self, video_id: str) -> Video:
        return self.videos.set_active(None, video_id)

    def update_video_url(self, video_id: str, file_url: str) -> Video:
        """Point a video at a new location, e.g. after moving it to a CDN."""
        with storage_guard(self.session, "update_video_url"):
            video = self.session.get(Video, video_id)
            if not video:
                raise NotFoundError(f"videos row {video_id} not found")
            video.file_url = file_url
            self.session.commit()
            self.session.refresh(video)
        return video

    def delete_video(self, video_id: str) -> Video:
        return self.videos.delete(None, video_id)
