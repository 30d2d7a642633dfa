import pytest
from fastapi.testclient import TestClient

from portfolio.api.app import create_app
from portfolio.config import get_settings

PDF_BYTES = b"%PDF-1.4\n1 0 obj <<>> endobj\n%%EOF"


def _upload(client: TestClient, name: str, user_id: str = "employer", data: bytes = PDF_BYTES):
    return client.post(
        "/api/resumes/upload",
        files={"resume": (name, data, "application/pdf")},
        data={"userId": user_id, "title": name, "description": "Uploaded via employer dashboard"},
    )


def test_upload_activates_newest_resume() -> None:
    client = TestClient(create_app())

    first = _upload(client, "general.pdf")
    assert first.status_code == 200
    first_resume = first.json()["resume"]
    assert first_resume["isActive"] is True
    assert first_resume["fileName"] == "general.pdf"
    assert first_resume["fileSize"] == len(PDF_BYTES)
    assert first_resume["userId"] == "employer"

    second = _upload(client, "banking.pdf")
    second_id = second.json()["resume"]["id"]

    listing = client.get("/api/resumes/employer").json()
    assert [row["id"] for row in listing if row["isActive"]] == [second_id]
    assert {row["fileName"] for row in listing} == {"general.pdf", "banking.pdf"}

    active = client.get("/api/resumes/active/employer")
    assert active.status_code == 200
    assert active.json()["id"] == second_id


def test_activate_and_serve_latest_pdf() -> None:
    client = TestClient(create_app())
    first_id = _upload(client, "general.pdf", data=PDF_BYTES + b"one").json()["resume"]["id"]
    _upload(client, "banking.pdf", data=PDF_BYTES + b"two")

    resp = client.post(f"/api/resumes/{first_id}/activate", params={"userId": "employer"})
    assert resp.status_code == 200
    assert resp.json()["isActive"] is True

    pdf = client.get("/api/resumes/latest/employer")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content == PDF_BYTES + b"one"


def test_activation_is_scoped_to_owner() -> None:
    client = TestClient(create_app())
    assert client.put("/api/users/recruiter", json={"email": "r@example.com"}).status_code == 200
    foreign_id = _upload(client, "theirs.pdf", user_id="recruiter").json()["resume"]["id"]

    resp = client.post(f"/api/resumes/{foreign_id}/activate", params={"userId": "employer"})
    assert resp.status_code == 404

    resp = client.delete(f"/api/resumes/{foreign_id}", params={"userId": "employer"})
    assert resp.status_code == 404
    assert client.get("/api/resumes/active/recruiter").json()["id"] == foreign_id


def test_delete_active_resume_leaves_none_active() -> None:
    client = TestClient(create_app())
    resume_id = _upload(client, "general.pdf").json()["resume"]["id"]

    resp = client.delete(f"/api/resumes/{resume_id}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "id": resume_id, "wasActive": True}

    assert client.get("/api/resumes/active/employer").status_code == 404
    assert client.get("/api/resumes/latest/employer").status_code == 404
    assert client.get("/api/resumes/employer").json() == []


def test_unknown_resume_and_owner_return_404() -> None:
    client = TestClient(create_app())
    assert client.post("/api/resumes/nope/activate").status_code == 404
    assert client.delete("/api/resumes/nope").status_code == 404
    assert _upload(client, "cv.pdf", user_id="ghost").status_code == 404


def test_rejects_non_pdf_upload() -> None:
    client = TestClient(create_app())
    resp = client.post(
        "/api/resumes/upload",
        files={"resume": ("cv.docx", b"PK\x03\x04", "application/msword")},
        data={"userId": "employer"},
    )
    assert resp.status_code == 400
    assert client.get("/api/resumes/employer").json() == []


def test_rejects_oversized_pdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(get_settings(), "max_resume_bytes", 16)
    client = TestClient(create_app())

    resp = _upload(client, "big.pdf", data=b"%PDF" + b"0" * 64)
    assert resp.status_code == 413
    assert client.get("/api/resumes/employer").json() == []
