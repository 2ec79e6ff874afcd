# tests/test_files.py
import os

from life_dashboards import repositories

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _upload(client, name, payload, content_type="application/octet-stream"):
    return client.post(
        "/files/upload",
        files={"file": (name, payload, content_type)},
        follow_redirects=False,
    )


def test_upload_stores_file_and_redirects(client, run, settings):
    response = _upload(client, "notes.txt", b"hello world", "text/plain")
    assert response.status_code == 303
    assert response.headers["location"] == "/"

    record = run(repositories.get_file, 1, 1)
    assert record["original_name"] == "notes.txt"
    assert record["mime_type"] == "text/plain"
    assert record["size_bytes"] == len(b"hello world")
    assert record["stored_name"].endswith("_notes.txt")
    assert (settings.files_dir / record["stored_name"]).read_bytes() == b"hello world"


def test_identical_names_get_distinct_stored_names(client, run, settings):
    _upload(client, "photo.png", PNG_BYTES)
    _upload(client, "photo.png", PNG_BYTES)

    first = run(repositories.get_file, 1, 1)
    second = run(repositories.get_file, 1, 2)
    assert first["stored_name"] != second["stored_name"]
    assert len(list(settings.files_dir.iterdir())) == 2


def test_mime_type_comes_from_content(client, run):
    _upload(client, "misnamed.txt", PNG_BYTES, "text/plain")
    assert run(repositories.get_file, 1, 1)["mime_type"] == "image/png"


def test_view_streams_inline(client):
    _upload(client, "notes.txt", b"hello world", "text/plain")

    response = client.get("/files/view?id=1")
    assert response.status_code == 200
    assert response.content == b"hello world"
    assert response.headers["content-type"].startswith("text/plain")
    assert response.headers["content-disposition"] == 'inline; filename="notes.txt"'
    assert response.headers["content-length"] == str(len(b"hello world"))


def test_view_unknown_id_is_not_found(client, settings):
    response = client.get("/files/view?id=999")
    assert response.status_code == 404
    assert response.text == "Not found"
    assert str(settings.uploads_dir) not in response.text


def test_view_non_numeric_id_is_not_found(client):
    assert client.get("/files/view?id=abc").status_code == 404
    assert client.get("/files/view").status_code == 404


def test_view_missing_on_disk_is_not_found(client, run):
    _upload(client, "gone.txt", b"bye", "text/plain")
    record = run(repositories.get_file, 1, 1)
    os.remove(record["stored_path"])

    response = client.get("/files/view?id=1")
    assert response.status_code == 404
    assert record["stored_path"] not in response.text


def test_upload_without_file_reports_error(client, run):
    response = client.post("/files/upload", data={"note": "nothing"}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/?error=missing_file"
    assert run(repositories.get_file, 1, 1) is None


def test_dashboard_lists_recent_files(client):
    _upload(client, "diagram.png", PNG_BYTES)
    _upload(client, "paper.pdf", b"%PDF-1.4 test", "application/pdf")
    _upload(client, "readme.md", b"# hi", "text/markdown")

    body = client.get("/").text
    assert '<img src="/files/view?id=1" class="file-preview"' in body
    assert '<iframe src="/files/view?id=2"' in body
    assert '<a href="/files/view?id=3" target="_blank"' in body
    assert body.index("readme.md") < body.index("paper.pdf") < body.index("diagram.png")


def test_dashboard_shows_upload_error(client):
    body = client.get("/?error=missing_file").text
    assert "Choose a file before uploading." in body
