import logging

import httpx

from caption_gateway.core.config import Settings
from caption_gateway.core.errors import UpstreamFailure

logger = logging.getLogger("caption_gateway.captions")

MOCK_CAPTIONS = (
    "When you realize it's only Tuesday",
    "Me pretending to understand the assignment",
    "POV: You just checked your bank account",
    "When someone says 'we need to talk'",
    "My last brain cell during finals week",
    "When the WiFi disconnects mid-submit",
    "Trying to adult but failing spectacularly",
    "When you see your professor outside of class",
    "My motivation at 2am vs 2pm",
    "When the group project partner finally responds",
)

EXTERNAL_API_FAILURE = "Failed to generate captions from external API"


def generate_mock_captions(context: str | None = None) -> list[dict]:
    captions = list(MOCK_CAPTIONS)
    if context:
        captions[0] = f"{context}: expectations vs reality"
        captions[1] = f"When {context.lower()} hits different"
    return [{"id": index + 1, "text": text} for index, text in enumerate(captions)]


def normalize_captions(payload) -> list[dict]:
    """Reshape a caption API response into ``[{"id": n, "text": ...}]``.

    Captions are read from ``captions`` or else ``data``; each entry may be a
    bare string or an object carrying ``text``. Ids follow array order from 1.
    """
    if not isinstance(payload, dict):
        raise UpstreamFailure("Unexpected response from caption API")

    items = payload.get("captions") or payload.get("data") or []
    if not isinstance(items, list):
        raise UpstreamFailure("Unexpected response from caption API")

    captions = []
    for index, item in enumerate(items):
        text = item.get("text") if isinstance(item, dict) else item
        captions.append({"id": index + 1, "text": "" if text is None else str(text)})
    return captions


class CaptionService:
    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self.settings = settings
        self.http = http

    @property
    def source(self) -> str:
        return "external" if self.settings.caption_api_enabled else "mock"

    async def generate(self, image_url: str, context: str | None = None) -> list[dict]:
        if not self.settings.caption_api_enabled:
            logger.info("No CAPTION_API_URL configured, using mock captions")
            return generate_mock_captions(context)
        return await self._request_captions(image_url, context)

    async def _request_captions(self, image_url: str, context: str | None) -> list[dict]:
        body = {"image_url": image_url, "num_captions": self.settings.num_captions}
        if context is not None:
            body["context"] = context

        try:
            response = await self.http.post(
                self.settings.caption_api_url,
                json=body,
                headers={"Authorization": f"Bearer {self.settings.caption_api_key}"},
                timeout=self.settings.caption_api_timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamFailure(
                f"Caption API request failed: timed out after {self.settings.caption_api_timeout_seconds:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"Caption API request failed: {exc}") from exc

        if not response.is_success:
            logger.error("Caption API error (HTTP %s): %s", response.status_code, response.text)
            raise UpstreamFailure(EXTERNAL_API_FAILURE)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamFailure("Caption API returned invalid JSON") from exc
        return normalize_captions(payload)
