from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import text

from portfolio.api.app import create_app
from portfolio.config import get_settings
from portfolio.db.models import Video
from portfolio.db.session import SessionLocal, engine


def _drop(statement: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(statement))


def _stored_resumes() -> set[Path]:
    directory = get_settings().upload_dir / "resumes"
    return set(directory.iterdir()) if directory.exists() else set()


def test_duplicate_email_returns_409() -> None:
    client = TestClient(create_app())
    resp = client.put("/api/users/copycat", json={"email": "employer@tylerbustard.ca"})
    assert resp.status_code == 409
    assert client.get("/api/users/copycat").status_code == 404


def test_two_active_videos_in_storage_return_409() -> None:
    _drop("DROP INDEX uq_videos_single_active")
    with SessionLocal() as db:
        db.add_all(
            [
                Video(file_name=f"{name}.mp4", file_url=f"/uploads/videos/{name}.mp4", is_active=True)
                for name in ("a", "b")
            ]
        )
        db.commit()

    client = TestClient(create_app())
    assert client.get("/api/videos/active").status_code == 409


def test_storage_failure_returns_500() -> None:
    _drop("DROP TABLE sql_queries")
    client = TestClient(create_app())

    resp = client.get("/api/sql-queries")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal Server Error"}


def test_failed_upload_returns_500_and_leaves_no_file() -> None:
    client = TestClient(create_app())
    before = _stored_resumes()
    _drop("DROP TABLE resume_uploads")

    resp = client.post(
        "/api/resumes/upload",
        files={"resume": ("cv.pdf", b"%PDF-1.4", "application/pdf")},
        data={"userId": "employer"},
    )
    assert resp.status_code == 500
    assert _stored_resumes() == before
