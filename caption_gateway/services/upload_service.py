import logging
import secrets
import string
import time

from caption_gateway.core.config import Settings
from caption_gateway.core.errors import BadRequest, StorageError, StorageErrorKind, UpstreamFailure
from caption_gateway.db.supabase import SupabaseClient
from caption_gateway.schemas.auth import AuthenticatedUser

logger = logging.getLogger("caption_gateway.upload")

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
DEFAULT_EXTENSION = "jpg"
RANDOM_ID_LENGTH = 13
_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def random_base36(length: int = RANDOM_ID_LENGTH) -> str:
    return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(length))


def file_extension(filename: str | None) -> str:
    name = (filename or "").rsplit("/", 1)[-1]
    if "." not in name:
        return DEFAULT_EXTENSION
    return name.rsplit(".", 1)[1] or DEFAULT_EXTENSION


def build_storage_key(
    user_id: str,
    filename: str | None,
    timestamp_ms: int | None = None,
    random_id: str | None = None,
) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{user_id}/{timestamp_ms}-{random_id or random_base36()}.{file_extension(filename)}"


class UploadService:
    def __init__(self, supabase: SupabaseClient, settings: Settings):
        self.supabase = supabase
        self.settings = settings

    def validate(self, content_type: str | None, size: int) -> None:
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise BadRequest("Invalid file type. Allowed: JPEG, PNG, GIF, WebP")
        if size > self.settings.max_upload_bytes:
            max_mb = self.settings.max_upload_bytes // (1024 * 1024)
            raise BadRequest(f"File too large. Maximum size is {max_mb}MB")

    async def save_upload(
        self,
        user: AuthenticatedUser,
        filename: str | None,
        content_type: str | None,
        payload: bytes,
        token: str | None = None,
    ) -> dict:
        self.validate(content_type, len(payload))

        bucket = self.settings.storage_bucket
        key = build_storage_key(user.id, filename)
        try:
            path = await self.supabase.upload_object(
                bucket,
                key,
                payload,
                content_type=content_type,
                cache_control_seconds=self.settings.upload_cache_control_seconds,
                upsert=False,
                token=token,
            )
        except StorageError as exc:
            logger.error("Supabase upload error (%s): %s", exc.kind.value, exc.message)
            if exc.kind is StorageErrorKind.NOT_FOUND:
                raise UpstreamFailure(
                    f'Storage bucket not configured. Please create an "{bucket}" bucket in Supabase Storage.'
                ) from exc
            raise UpstreamFailure(f"Upload failed: {exc.message}") from exc

        logger.info("Stored %s bytes for user %s at %s/%s", len(payload), user.id, bucket, path)
        return {
            "success": True,
            "url": self.supabase.public_url(bucket, path),
            "path": path,
        }
