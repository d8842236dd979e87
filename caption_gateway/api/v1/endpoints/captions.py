import logging
from collections.abc import AsyncGenerator

import httpx
from fastapi import APIRouter, Depends, Request

from caption_gateway.api.v1.deps import parse_body, read_json_object
from caption_gateway.core.config import Settings, get_settings
from caption_gateway.core.errors import BadRequest, GatewayError, Unknown
from caption_gateway.schemas.auth import AuthenticatedUser
from caption_gateway.schemas.captions import CaptionRequest, CaptionResponse
from caption_gateway.security import require_user
from caption_gateway.services.caption_service import CaptionService

logger = logging.getLogger("caption_gateway.captions")

router = APIRouter(tags=["captions"])


async def get_caption_service(settings: Settings = Depends(get_settings)) -> AsyncGenerator[CaptionService, None]:
    async with httpx.AsyncClient(follow_redirects=True, timeout=settings.caption_api_timeout_seconds) as http:
        yield CaptionService(settings=settings, http=http)


@router.post("/api/generate-captions", response_model=CaptionResponse, response_model_exclude_none=True)
@router.post("/api/v1/generate-captions", response_model=CaptionResponse, response_model_exclude_none=True)
async def generate_captions(
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
    service: CaptionService = Depends(get_caption_service),
) -> dict:
    try:
        payload: CaptionRequest = parse_body(CaptionRequest, await read_json_object(request))
        if not payload.image_url:
            raise BadRequest("Image URL is required")

        logger.info("Generating %s captions for user %s", service.source, user.id)
        captions = await service.generate(payload.image_url, payload.context)
        return {
            "success": True,
            "image_url": payload.image_url,
            "context": payload.context,
            "captions": captions,
        }
    except GatewayError:
        raise
    except Exception as exc:
        logger.exception("Error generating captions")
        raise Unknown(str(exc) or "Failed to generate captions") from exc
