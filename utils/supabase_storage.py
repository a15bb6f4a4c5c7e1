"""
Blob storage for admin media uploads (Supabase Storage).

Only the admin upload route uses this module. The client is created on first
use so the rest of the API runs without storage credentials.
"""
import os
import re
import logging
import httpx
import httpcore
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from supabase import create_client, Client
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log

from utils.errors import DependencyFailure, ValidationError
from utils.logger_factory import new_logger
from utils.short_id import generate_short_id

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
SUPABASE_BUCKET = os.getenv("SUPABASE_BUCKET", "site-media")

MB = 1024 * 1024
UPLOAD_CHUNK_BYTES = 1 * MB

# Accepted upload kinds: content types and byte limits
UPLOAD_RULES = {
    "image": {
        "types": ("image/jpeg", "image/png", "image/gif", "image/webp"),
        "max_bytes": 5 * MB,
    },
    "video": {
        "types": ("video/mp4", "video/webm", "video/quicktime"),
        "max_bytes": 100 * MB,
    },
    "document": {
        "types": ("application/pdf",),
        "max_bytes": 10 * MB,
    },
}

_client = None

TRANSIENT_ERRORS = (
    httpx.ReadError, httpx.ConnectError, httpx.TimeoutException, httpx.WriteError,
    httpcore.ReadError, httpcore.ConnectError, httpcore.TimeoutException, httpcore.WriteError,
)

upload_retry_logger = new_logger("supabase_upload_retry")


def get_storage_client() -> Client:
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise DependencyFailure("File storage is not configured.")
        _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    return _client


def sanitize_storage_key(text: str) -> str:
    """
    Reduce ``text`` to lowercase ASCII letters, digits, hyphens and underscores.

    Example:
        sanitize_storage_key("Retreat Photo (1).JPG") -> "retreat_photo_1jpg"
    """
    if not text:
        return "file"
    sanitized = text.lower().replace(" ", "_")
    sanitized = re.sub(r'[^a-z0-9_-]', '', sanitized)
    sanitized = re.sub(r'_+', '_', sanitized).strip('_-')
    return sanitized or "file"


def _rules_for(kind: str) -> dict:
    rules = UPLOAD_RULES.get(kind)
    if rules is None:
        raise ValidationError(f"Unsupported upload kind: {kind}")
    return rules


def _too_large(rules: dict) -> ValidationError:
    return ValidationError(f"File too large. Maximum size is {rules['max_bytes'] // MB}MB")


def validate_upload(kind: str, content_type: str, size: int) -> None:
    rules = _rules_for(kind)
    if content_type not in rules["types"]:
        raise ValidationError(f"Invalid file type. Allowed types: {', '.join(rules['types'])}")
    if size > rules["max_bytes"]:
        raise _too_large(rules)


async def read_upload(file: UploadFile, kind: str) -> bytes:
    """
    Read an incoming upload in chunks.

    The declared type and size are checked before anything is read, and the
    read stops as soon as the body passes the limit for ``kind``.
    """
    validate_upload(kind, file.content_type, file.size or 0)
    rules = _rules_for(kind)
    chunks = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > rules["max_bytes"]:
            raise _too_large(rules)
        chunks.append(chunk)
    return b"".join(chunks)


def build_storage_key(kind: str, filename: str) -> str:
    stem, _, extension = (filename or "file").rpartition(".")
    if not stem:
        stem, extension = extension, ""
    extension = sanitize_storage_key(extension)[:8]
    key = f"{kind}s/{generate_short_id()}-{sanitize_storage_key(stem)[:60]}"
    return f"{key}.{extension}" if extension else key


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(TRANSIENT_ERRORS),
    before_sleep=before_sleep_log(upload_retry_logger, logging.WARNING),
    reraise=True
)
def _upload_with_retry(file_content: bytes, key: str, content_type: str) -> str:
    bucket = get_storage_client().storage.from_(SUPABASE_BUCKET)
    res = bucket.upload(
        path=key,
        file=file_content,
        file_options={"content-type": content_type, "cache-control": "max-age=3600", "upsert": "true"},
    )
    if hasattr(res, "error") and res.error:
        raise RuntimeError(f"Supabase upload failed: {res.error}")
    return bucket.get_public_url(key)


async def upload_media(file_content: bytes, filename: str, content_type: str, kind: str = "image") -> str:
    """Validate and upload an admin media file, returning its public URL."""
    log = new_logger("upload_media")
    validate_upload(kind, content_type, len(file_content))
    key = build_storage_key(kind, filename)
    try:
        public_url = await run_in_threadpool(_upload_with_retry, file_content, key, content_type)
    except DependencyFailure:
        raise
    except Exception as e:
        log.error(f"Upload of {key} failed: {type(e).__name__}: {str(e)}")
        raise DependencyFailure("Failed to upload file. Please try again.")
    log.info(f"Uploaded {key} ({len(file_content)} bytes)")
    return public_url
