"""On-disk storage for uploaded files and the profile avatar.

Everything here is blocking file IO; routes call into it through the
thread pool.
"""
from __future__ import annotations

import logging
import mimetypes
import os
import re
import secrets
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

SNIFF_BYTES = 512
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")

_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
)


class UploadError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class StoredUpload:
    original_name: str
    stored_name: str
    stored_path: str
    mime_type: str
    size_bytes: int


def sanitize_filename(name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", os.path.basename(name or ""))


def make_stored_name(original_name: str) -> str:
    return f"{secrets.token_hex(8)}_{sanitize_filename(original_name)}"


def sniff_mime_type(head: bytes, filename: str = "") -> str:
    for signature, mime_type in _SIGNATURES:
        if head.startswith(signature):
            return mime_type
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    stripped = head.lstrip()
    if stripped.startswith(b"<svg") or (stripped.startswith(b"<?xml") and b"<svg" in head):
        return "image/svg+xml"
    guessed, _ = mimetypes.guess_type(filename or "")
    if guessed:
        return guessed
    if not head:
        return "application/x-empty"
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as exc:
        # A multibyte character may be cut at the sniff boundary.
        if len(head) < SNIFF_BYTES or exc.start < len(head) - 3:
            return "application/octet-stream"
    return "text/plain"


def _copy_stream(source: BinaryIO, destination: Path) -> int:
    with open(destination, "wb") as output_file:
        shutil.copyfileobj(source, output_file)
    return destination.stat().st_size


def store_upload(source: BinaryIO | None, original_name: str | None, files_dir: Path) -> StoredUpload:
    if source is None or not (original_name or "").strip():
        raise UploadError("missing_file", "No file was uploaded.")
    head = source.read(SNIFF_BYTES)
    source.seek(0)
    mime_type = sniff_mime_type(head, original_name)
    stored_name = make_stored_name(original_name)
    destination = Path(files_dir) / stored_name
    try:
        size = _copy_stream(source, destination)
    except OSError as exc:
        destination.unlink(missing_ok=True)
        raise UploadError("store_failed", f"Could not store {original_name}: {exc}") from exc
    logger.info("Stored upload %s as %s (%s, %d bytes)", original_name, stored_name, mime_type, size)
    return StoredUpload(
        original_name=original_name,
        stored_name=stored_name,
        stored_path=str(destination.resolve()),
        mime_type=mime_type,
        size_bytes=size,
    )


def avatar_filename(user_id: int, original_name: str) -> str:
    ext = Path(original_name or "").suffix.lstrip(".")
    ext = _UNSAFE_NAME_CHARS.sub("", ext).lower()
    return f"avatar_{user_id}.{ext or 'png'}"


def replace_avatar(
    source: BinaryIO | None,
    original_name: str | None,
    avatars_dir: Path,
    user_id: int,
    previous_path: str | None = None,
) -> str:
    """Swap the user's avatar for the uploaded file and return its absolute path."""
    if source is None or not (original_name or "").strip():
        raise UploadError("missing_file", "No avatar was uploaded.")
    avatars_dir = Path(avatars_dir)
    stale = set(avatars_dir.glob(f"avatar_{user_id}.*"))
    if previous_path:
        stale.add(Path(previous_path))
    try:
        for path in stale:
            path.unlink(missing_ok=True)
    except OSError as exc:
        raise UploadError("store_failed", f"Could not remove the previous avatar: {exc}") from exc
    destination = avatars_dir / avatar_filename(user_id, original_name)
    try:
        _copy_stream(source, destination)
    except OSError as exc:
        destination.unlink(missing_ok=True)
        raise UploadError("store_failed", f"Could not store avatar: {exc}") from exc
    logger.info("Replaced avatar for user %s with %s", user_id, destination.name)
    return str(destination.resolve())
