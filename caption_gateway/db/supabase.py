"""
Async REST access to the Supabase project backing the app.

Only the three surfaces the gateway consumes are wrapped: the auth API (session
lookup), the storage API (bucket uploads and public URLs) and PostgREST table
reads/writes. Requests carry the caller's access token when one is given so row
level security applies as it would for the browser client.
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from caption_gateway.core.errors import StorageError, StorageErrorKind, UpstreamFailure
from caption_gateway.schemas.auth import AuthenticatedUser

logger = logging.getLogger("caption_gateway.supabase")

NOT_CONFIGURED_MESSAGE = "Supabase credentials not configured"


def _json_or_none(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None


def _upstream_message(response: httpx.Response) -> str:
    payload = _json_or_none(response)
    if isinstance(payload, dict):
        for key in ("message", "error_description", "msg", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return response.text or f"HTTP {response.status_code}"


def classify_storage_error(response: httpx.Response) -> StorageError:
    """Map a failed storage response onto a tagged ``StorageError``.

    The storage API often answers with HTTP 400 and puts the real status in a
    ``statusCode`` string field of the body, so that field wins when present.
    """
    code = response.status_code
    payload = _json_or_none(response)
    if isinstance(payload, dict):
        try:
            code = int(payload.get("statusCode"))
        except (TypeError, ValueError):
            pass

    if code == 404:
        kind = StorageErrorKind.NOT_FOUND
    elif code in (401, 403):
        kind = StorageErrorKind.PERMISSION_DENIED
    elif code == 409:
        kind = StorageErrorKind.ALREADY_EXISTS
    else:
        kind = StorageErrorKind.OTHER
    return StorageError(kind, _upstream_message(response))


class SupabaseClient:
    def __init__(self, base_url: str, anon_key: str, http: httpx.AsyncClient):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.anon_key = (anon_key or "").strip()
        self.http = http

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.anon_key)

    def _ensure_configured(self) -> None:
        if not self.configured:
            raise UpstreamFailure(NOT_CONFIGURED_MESSAGE)

    def _headers(self, token: str | None = None, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def get_user(self, token: str) -> AuthenticatedUser | None:
        self._ensure_configured()
        try:
            response = await self.http.get(f"{self.base_url}/auth/v1/user", headers=self._headers(token))
        except httpx.HTTPError as exc:
            logger.warning("Session lookup failed: %s", exc)
            return None

        if response.status_code != 200:
            logger.info("Session rejected by auth API (HTTP %s)", response.status_code)
            return None

        payload = _json_or_none(response)
        if not isinstance(payload, dict) or not payload.get("id"):
            return None
        try:
            return AuthenticatedUser(id=str(payload["id"]), email=payload.get("email"))
        except ValidationError:
            logger.warning("Auth API returned an unexpected user payload")
            return None

    async def upload_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        cache_control_seconds: int,
        upsert: bool = False,
        token: str | None = None,
    ) -> str:
        self._ensure_configured()
        url = f"{self.base_url}/storage/v1/object/{bucket}/{quote(path, safe='/')}"
        headers = self._headers(
            token,
            {
                "Content-Type": content_type,
                "cache-control": f"max-age={cache_control_seconds}",
                "x-upsert": "true" if upsert else "false",
            },
        )
        try:
            response = await self.http.post(url, content=data, headers=headers)
        except httpx.HTTPError as exc:
            raise StorageError(StorageErrorKind.OTHER, str(exc) or "Storage request failed") from exc

        if response.is_error:
            raise classify_storage_error(response)
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(path, safe='/')}"

    async def select(self, table: str, limit: int | None = None, token: str | None = None) -> list[dict]:
        self._ensure_configured()
        params = {"select": "*"}
        if limit is not None:
            params["limit"] = str(limit)
        try:
            response = await self.http.get(
                f"{self.base_url}/rest/v1/{table}",
                params=params,
                headers=self._headers(token),
            )
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"Failed to read {table}: {exc}") from exc

        if response.is_error:
            raise UpstreamFailure(_upstream_message(response))
        rows = _json_or_none(response)
        return rows if isinstance(rows, list) else []

    async def insert(self, table: str, row: dict, token: str | None = None) -> dict:
        self._ensure_configured()
        try:
            response = await self.http.post(
                f"{self.base_url}/rest/v1/{table}",
                json=row,
                headers=self._headers(token, {"Prefer": "return=representation"}),
            )
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"Failed to write {table}: {exc}") from exc

        if response.is_error:
            raise UpstreamFailure(_upstream_message(response))
        rows = _json_or_none(response)
        if isinstance(rows, list) and rows:
            return rows[0]
        return dict(row)
