from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserUpsertRequest(CamelModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class UserResponse(UserUpsertRequest):
    id: str
    created_at: datetime
    updated_at: datetime


class ContactMessageRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    subject: str = ""
    message: str = Field(min_length=1)


class ContactMessageResponse(ContactMessageRequest):
    id: int
    created_at: datetime


class SqlQueryRequest(CamelModel):
    query: str = Field(min_length=1)


class SqlQueryResponse(SqlQueryRequest):
    id: int
    created_at: datetime


class ResumeUploadResponse(CamelModel):
    id: str
    user_id: str
    file_name: str
    file_url: str
    file_size: int
    description: str | None
    is_active: bool
    uploaded_at: datetime


class ResumeUploadResult(CamelModel):
    message: str
    resume: ResumeUploadResponse


class VideoResponse(CamelModel):
    id: str
    title: str | None
    file_name: str
    file_url: str
    file_size: int
    uploaded_by: str | None
    is_active: bool
    created_at: datetime


class VideoUploadResult(CamelModel):
    message: str
    video: VideoResponse


class DeleteResponse(CamelModel):
    success: bool = True
    id: str
    was_active: bool
