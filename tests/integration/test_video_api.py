from fastapi.testclient import TestClient

from portfolio.api.app import create_app


def _upload(client: TestClient, name: str, data: bytes, content_type: str = "video/mp4"):
    return client.post(
        "/api/videos/upload",
        files={"video": (name, data, content_type)},
        data={"title": name.rsplit(".", 1)[0], "uploadedBy": "employer@tylerbustard.ca"},
    )


def test_upload_activate_and_stream_introduction_video() -> None:
    client = TestClient(create_app())

    first = _upload(client, "intro.mp4", b"first-video")
    assert first.status_code == 200
    first_video = first.json()["video"]
    assert first_video["isActive"] is True
    assert first_video["title"] == "intro"
    assert first_video["uploadedBy"] == "employer@tylerbustard.ca"

    second_id = _upload(client, "intro-2.webm", b"second-video", "video/webm").json()["video"]["id"]
    videos = client.get("/api/videos").json()
    assert [row["id"] for row in videos] == [second_id, first_video["id"]]
    assert [row["id"] for row in videos if row["isActive"]] == [second_id]

    resp = client.post(f"/api/videos/{first_video['id']}/activate")
    assert resp.status_code == 200
    assert client.get("/api/videos/active").json()["id"] == first_video["id"]

    stream = client.get("/api/introduction-video")
    assert stream.status_code == 200
    assert stream.content == b"first-video"


def test_activating_active_video_again_changes_nothing() -> None:
    client = TestClient(create_app())
    video_id = _upload(client, "intro.mp4", b"v").json()["video"]["id"]

    before = client.get("/api/videos").json()
    assert client.post(f"/api/videos/{video_id}/activate").status_code == 200
    assert client.get("/api/videos").json() == before


def test_delete_active_video_does_not_promote_another() -> None:
    client = TestClient(create_app())
    older_id = _upload(client, "old.mp4", b"old").json()["video"]["id"]
    newer_id = _upload(client, "new.mp4", b"new").json()["video"]["id"]

    resp = client.delete(f"/api/videos/{newer_id}")
    assert resp.status_code == 200
    assert resp.json()["wasActive"] is True

    assert client.get("/api/videos/active").status_code == 404
    assert client.get("/api/introduction-video").status_code == 404
    remaining = client.get("/api/videos").json()
    assert [(row["id"], row["isActive"]) for row in remaining] == [(older_id, False)]


def test_video_errors() -> None:
    client = TestClient(create_app())
    assert client.post("/api/videos/missing/activate").status_code == 404
    assert client.delete("/api/videos/missing").status_code == 404
    assert _upload(client, "poster.png", b"png", "image/png").status_code == 400
    assert client.post("/api/videos/upload", data={"title": "no file"}).status_code == 422
