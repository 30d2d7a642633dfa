from __future__ import annotations

import json

import typer
import uvicorn

from portfolio.api.app import create_app
from portfolio.config import get_settings
from portfolio.core.media import MediaLibrary
from portfolio.db.errors import NotFoundError
from portfolio.db.init import init_database
from portfolio.db.models import ResumeUpload, Video
from portfolio.db.repositories import Repository
from portfolio.db.session import SessionLocal
from portfolio.logging_config import configure_logging

app = typer.Typer(help="Portfolio site CLI")
user_app = typer.Typer(help="Manage site users")
resume_app = typer.Typer(help="Manage uploaded resumes")
video_app = typer.Typer(help="Manage introduction videos")

app.add_typer(user_app, name="user")
app.add_typer(resume_app, name="resume")
app.add_typer(video_app, name="video")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _resume_row(row: ResumeUpload) -> dict:
    return {
        "id": row.id,
        "user_id": row.user_id,
        "file_name": row.file_name,
        "file_url": row.file_url,
        "file_size": row.file_size,
        "is_active": row.is_active,
        "uploaded_at": row.uploaded_at.isoformat() if row.uploaded_at else None,
    }


def _video_row(row: Video) -> dict:
    return {
        "id": row.id,
        "title": row.title,
        "file_name": row.file_name,
        "file_url": row.file_url,
        "is_active": row.is_active,
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }


def _owner(user_id: str | None) -> str:
    return user_id or get_settings().default_owner_id


@app.command("init")
def init_cmd() -> None:
    """Initialize database, directories, and the owner user."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@user_app.command("upsert")
def user_upsert(
    user_id: str = typer.Option(..., "--id"),
    email: str | None = typer.Option(None, "--email"),
    first_name: str | None = typer.Option(None, "--first-name"),
    last_name: str | None = typer.Option(None, "--last-name"),
) -> None:
    configure_logging()
    ensure_initialized()
    values = {
        key: value
        for key, value in {"email": email, "first_name": first_name, "last_name": last_name}.items()
        if value is not None
    }
    with SessionLocal() as db:
        user = Repository(db).upsert_user(user_id, values)
        typer.echo(json.dumps({"id": user.id, "email": user.email}, indent=2))


@user_app.command("delete")
def user_delete(user_id: str = typer.Option(..., "--id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            Repository(db).delete_user(user_id)
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"deleted": user_id}, indent=2))


@resume_app.command("list")
def resume_list(user_id: str | None = typer.Option(None, "--user-id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_resume_uploads(_owner(user_id))
        typer.echo(json.dumps([_resume_row(row) for row in rows], indent=2))


@resume_app.command("active")
def resume_active(user_id: str | None = typer.Option(None, "--user-id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        row = Repository(db).get_active_resume(_owner(user_id))
        typer.echo(json.dumps(_resume_row(row) if row else None, indent=2))


@resume_app.command("activate")
def resume_activate(
    resume_id: str = typer.Option(..., "--id"),
    user_id: str | None = typer.Option(None, "--user-id"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            row = Repository(db).set_active_resume(resume_id, _owner(user_id))
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps(_resume_row(row), indent=2))


@resume_app.command("delete")
def resume_delete(
    resume_id: str = typer.Option(..., "--id"),
    user_id: str | None = typer.Option(None, "--user-id"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            row = MediaLibrary(db).delete_resume(resume_id, _owner(user_id))
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"deleted": row.id, "was_active": row.is_active}, indent=2))


@video_app.command("list")
def video_list() -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_videos()
        typer.echo(json.dumps([_video_row(row) for row in rows], indent=2))


@video_app.command("active")
def video_active() -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        row = Repository(db).get_active_video()
        typer.echo(json.dumps(_video_row(row) if row else None, indent=2))


@video_app.command("activate")
def video_activate(video_id: str = typer.Option(..., "--id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            row = Repository(db).set_active_video(video_id)
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps(_video_row(row), indent=2))


@video_app.command("set-url")
def video_set_url(
    video_id: str = typer.Option(..., "--id"),
    file_url: str = typer.Option(..., "--url"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            row = Repository(db).update_video_url(video_id, file_url)
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps(_video_row(row), indent=2))


@video_app.command("delete")
def video_delete(video_id: str = typer.Option(..., "--id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            row = MediaLibrary(db).delete_video(video_id)
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"deleted": row.id, "was_active": row.is_active}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    configure_logging(log_level)
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
