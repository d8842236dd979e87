from caption_gateway.core.config import Settings
from caption_gateway.core.errors import StorageError, UpstreamFailure
from caption_gateway.db.supabase import NOT_CONFIGURED_MESSAGE
from caption_gateway.schemas.auth import AuthenticatedUser

SUPABASE_URL = "https://example.supabase.co"
VALID_TOKEN = "valid-session-token"
AUTH_HEADERS = {"Authorization": f"Bearer {VALID_TOKEN}"}


def make_settings(**overrides) -> Settings:
    values = {
        "supabase_url": SUPABASE_URL,
        "supabase_anon_key": "anon-key",
        "caption_api_url": "",
        "caption_api_key": "",
        "google_client_id": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeSupabase:
    """In-memory stand-in for ``SupabaseClient`` that records every call."""

    def __init__(
        self,
        user: AuthenticatedUser | None = None,
        configured: bool = True,
        upload_error: StorageError | None = None,
        rows: dict[str, list[dict]] | None = None,
    ):
        self.user = user or AuthenticatedUser(id="user-123", email="student@example.com")
        self._configured = configured
        self.upload_error = upload_error
        self.rows = rows or {}
        self.calls: list[tuple] = []
        self.uploads: list[dict] = []
        self.inserted: list[tuple[str, dict]] = []

    @property
    def configured(self) -> bool:
        return self._configured

    def _ensure_configured(self) -> None:
        if not self._configured:
            raise UpstreamFailure(NOT_CONFIGURED_MESSAGE)

    async def get_user(self, token: str) -> AuthenticatedUser | None:
        self.calls.append(("get_user", token))
        return self.user if token == VALID_TOKEN else None

    async def upload_object(self, bucket, path, data, content_type, cache_control_seconds, upsert=False, token=None):
        self.calls.append(("upload_object", bucket, path))
        if self.upload_error is not None:
            raise self.upload_error
        self.uploads.append(
            {
                "bucket": bucket,
                "path": path,
                "data": data,
                "content_type": content_type,
                "cache_control_seconds": cache_control_seconds,
                "upsert": upsert,
                "token": token,
            }
        )
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{SUPABASE_URL}/storage/v1/object/public/{bucket}/{path}"

    async def select(self, table, limit=None, token=None):
        self.calls.append(("select", table, limit, token))
        self._ensure_configured()
        rows = self.rows.get(table, [])
        return rows[:limit] if limit is not None else rows

    async def insert(self, table, row, token=None):
        self.calls.append(("insert", table, token))
        self._ensure_configured()
        self.inserted.append((table, row))
        return {"id": len(self.inserted), **row}
