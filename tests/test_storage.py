# tests/test_storage.py
import io
import re

import pytest

from life_dashboards.storage import (
    UploadError,
    avatar_filename,
    make_stored_name,
    replace_avatar,
    sanitize_filename,
    sniff_mime_type,
    store_upload,
)


def test_sanitize_replaces_unsafe_characters():
    assert sanitize_filename("my photo (1).png") == "my_photo__1_.png"
    assert sanitize_filename("../../etc/passwd") == "passwd"


def test_stored_name_has_random_hex_prefix():
    name = make_stored_name("report final.pdf")
    assert re.fullmatch(r"[0-9a-f]{16}_report_final\.pdf", name)
    assert make_stored_name("report final.pdf") != name


@pytest.mark.parametrize(
    "head, filename, expected",
    [
        (b"\x89PNG\r\n\x1a\n....", "a.bin", "image/png"),
        (b"\xff\xd8\xff\xe0", "a.txt", "image/jpeg"),
        (b"GIF89a", "", "image/gif"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "", "image/webp"),
        (b"%PDF-1.7", "doc", "application/pdf"),
        (b"<svg xmlns='http://www.w3.org/2000/svg'/>", "", "image/svg+xml"),
        (b"just some words", "", "text/plain"),
        (b"\x00\x01\xfe\xff\x80", "", "application/octet-stream"),
    ],
)
def test_sniff_mime_type(head, filename, expected):
    assert sniff_mime_type(head, filename) == expected


def test_sniff_falls_back_to_extension():
    assert sniff_mime_type(b"\x00\x01\xfe\xff", "archive.zip") == "application/zip"


def test_store_upload_copies_stream(tmp_path):
    stored = store_upload(io.BytesIO(b"%PDF-1.4 body"), "paper.pdf", tmp_path)
    assert stored.mime_type == "application/pdf"
    assert stored.size_bytes == len(b"%PDF-1.4 body")
    assert (tmp_path / stored.stored_name).read_bytes() == b"%PDF-1.4 body"
    assert stored.stored_path == str((tmp_path / stored.stored_name).resolve())


def test_store_upload_requires_a_file(tmp_path):
    with pytest.raises(UploadError) as excinfo:
        store_upload(None, None, tmp_path)
    assert excinfo.value.code == "missing_file"


def test_store_upload_reports_copy_failure(tmp_path):
    with pytest.raises(UploadError) as excinfo:
        store_upload(io.BytesIO(b"data"), "a.txt", tmp_path / "missing-dir")
    assert excinfo.value.code == "store_failed"


def test_avatar_filename_uses_extension_only():
    assert avatar_filename(1, "Holiday Pic.JPG") == "avatar_1.jpg"
    assert avatar_filename(7, "noext") == "avatar_7.png"


def test_replace_avatar_removes_previous_files(tmp_path):
    (tmp_path / "avatar_1.png").write_bytes(b"old")
    (tmp_path / "avatar_1.webp").write_bytes(b"older")
    (tmp_path / "avatar_2.png").write_bytes(b"someone else")

    path = replace_avatar(io.BytesIO(b"new"), "me.jpeg", tmp_path, 1)

    assert sorted(p.name for p in tmp_path.iterdir()) == ["avatar_1.jpeg", "avatar_2.png"]
    assert path == str((tmp_path / "avatar_1.jpeg").resolve())
