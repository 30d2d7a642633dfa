from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from portfolio.api.deps import get_db
from portfolio.api.schemas import (
    ContactMessageRequest,
    ContactMessageResponse,
    DeleteResponse,
    ResumeUploadResponse,
    ResumeUploadResult,
    SqlQueryRequest,
    SqlQueryResponse,
    UserResponse,
    UserUpsertRequest,
    VideoResponse,
    VideoUploadResult,
)
from portfolio.config import get_settings
from portfolio.core.media import (
    PDF_CONTENT_TYPE,
    InvalidUploadError,
    MediaLibrary,
    UploadedFile,
    UploadTooLargeError,
)
from portfolio.db.errors import NotFoundError
from portfolio.db.repositories import Repository

router = APIRouter(prefix="/api", tags=["api"])


def _owner(user_id: str | None) -> str:
    return user_id or get_settings().default_owner_id


def _read_upload(upload: UploadFile, max_bytes: int) -> UploadedFile:
    # one byte past the limit is enough to reject oversized files
    data = upload.file.read(max_bytes + 1)
    return UploadedFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "",
        data=data,
    )


def _upload_error(exc: InvalidUploadError) -> HTTPException:
    status_code = 413 if isinstance(exc, UploadTooLargeError) else 400
    return HTTPException(status_code=status_code, detail=str(exc))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)) -> UserResponse:
    user = Repository(db).get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(user)


@router.put("/users/{user_id}", response_model=UserResponse)
def upsert_user(user_id: str, payload: UserUpsertRequest, db: Session = Depends(get_db)) -> UserResponse:
    user = Repository(db).upsert_user(user_id, payload.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.post("/contact", response_model=ContactMessageResponse)
def create_contact_message(
    payload: ContactMessageRequest,
    db: Session = Depends(get_db),
) -> ContactMessageResponse:
    message = Repository(db).create_contact_message(
        name=payload.name,
        email=payload.email,
        subject=payload.subject,
        message=payload.message,
    )
    return ContactMessageResponse.model_validate(message)


@router.get("/contact", response_model=list[ContactMessageResponse])
def list_contact_messages(db: Session = Depends(get_db)) -> list[ContactMessageResponse]:
    return [ContactMessageResponse.model_validate(row) for row in Repository(db).list_contact_messages()]


@router.post("/sql-queries", response_model=SqlQueryResponse)
def create_sql_query(payload: SqlQueryRequest, db: Session = Depends(get_db)) -> SqlQueryResponse:
    return SqlQueryResponse.model_validate(Repository(db).create_sql_query(payload.query))


@router.get("/sql-queries", response_model=list[SqlQueryResponse])
def list_sql_queries(db: Session = Depends(get_db)) -> list[SqlQueryResponse]:
    return [SqlQueryResponse.model_validate(row) for row in Repository(db).list_sql_queries()]


@router.post("/resumes/upload", response_model=ResumeUploadResult)
def upload_resume(
    resume: UploadFile = File(...),
    user_id: str | None = Form(None, alias="userId"),
    title: str = Form(""),
    description: str = Form(""),
    db: Session = Depends(get_db),
) -> ResumeUploadResult:
    upload = _read_upload(resume, get_settings().max_resume_bytes)
    try:
        record = MediaLibrary(db).upload_resume(
            user_id=_owner(user_id),
            upload=upload,
            description=description or title or None,
        )
    except InvalidUploadError as exc:
        raise _upload_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return ResumeUploadResult(
        message="Resume uploaded and set as active",
        resume=ResumeUploadResponse.model_validate(record),
    )


@router.get("/resumes/active/{user_id}", response_model=ResumeUploadResponse)
def get_active_resume(user_id: str, db: Session = Depends(get_db)) -> ResumeUploadResponse:
    record = Repository(db).get_active_resume(user_id)
    if not record:
        raise HTTPException(status_code=404, detail="No active resume")
    return ResumeUploadResponse.model_validate(record)


@router.get("/resumes/latest/{user_id}")
def download_active_resume(user_id: str, db: Session = Depends(get_db)) -> FileResponse:
    try:
        record, path = MediaLibrary(db).active_resume_file(user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return FileResponse(
        path,
        media_type=PDF_CONTENT_TYPE,
        filename=record.file_name,
        content_disposition_type="inline",
    )


@router.get("/resumes/{user_id}", response_model=list[ResumeUploadResponse])
def list_resumes(user_id: str, db: Session = Depends(get_db)) -> list[ResumeUploadResponse]:
    rows = Repository(db).list_resume_uploads(user_id)
    return [ResumeUploadResponse.model_validate(row) for row in rows]


@router.post("/resumes/{resume_id}/activate", response_model=ResumeUploadResponse)
def activate_resume(
    resume_id: str,
    user_id: str | None = Query(None, alias="userId"),
    db: Session = Depends(get_db),
) -> ResumeUploadResponse:
    try:
        record = Repository(db).set_active_resume(resume_id, _owner(user_id))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ResumeUploadResponse.model_validate(record)


@router.delete("/resumes/{resume_id}", response_model=DeleteResponse)
def delete_resume(
    resume_id: str,
    user_id: str | None = Query(None, alias="userId"),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    try:
        record = MediaLibrary(db).delete_resume(resume_id, _owner(user_id))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return DeleteResponse(id=resume_id, was_active=record.is_active)


@router.get("/videos", response_model=list[VideoResponse])
def list_videos(db: Session = Depends(get_db)) -> list[VideoResponse]:
    return [VideoResponse.model_validate(row) for row in Repository(db).list_videos()]


@router.post("/videos/upload", response_model=VideoUploadResult)
def upload_video(
    video: UploadFile = File(...),
    title: str = Form(""),
    uploaded_by: str | None = Form(None, alias="uploadedBy"),
    db: Session = Depends(get_db),
) -> VideoUploadResult:
    upload = _read_upload(video, get_settings().max_video_bytes)
    try:
        record = MediaLibrary(db).upload_video(upload=upload, title=title or None, uploaded_by=uploaded_by)
    except InvalidUploadError as exc:
        raise _upload_error(exc) from exc

    return VideoUploadResult(
        message="Video uploaded and set as active",
        video=VideoResponse.model_validate(record),
    )


@router.get("/videos/active", response_model=VideoResponse)
def get_active_video(db: Session = Depends(get_db)) -> VideoResponse:
    record = Repository(db).get_active_video()
    if not record:
        raise HTTPException(status_code=404, detail="No active video")
    return VideoResponse.model_validate(record)


@router.post("/videos/{video_id}/activate", response_model=VideoResponse)
def activate_video(video_id: str, db: Session = Depends(get_db)) -> VideoResponse:
    try:
        record = Repository(db).set_active_video(video_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return VideoResponse.model_validate(record)


@router.delete("/videos/{video_id}", response_model=DeleteResponse)
def delete_video(video_id: str, db: Session = Depends(get_db)) -> DeleteResponse:
    try:
        record = MediaLibrary(db).delete_video(video_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return DeleteResponse(id=video_id, was_active=record.is_active)


@router.get("/introduction-video")
def stream_active_video(db: Session = Depends(get_db)) -> FileResponse:
    try:
        record, path = MediaLibrary(db).active_video_file()
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return FileResponse(path, filename=record.file_name, content_disposition_type="inline")
