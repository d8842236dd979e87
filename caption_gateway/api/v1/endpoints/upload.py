import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from caption_gateway.core.config import Settings, get_settings
from caption_gateway.core.errors import BadRequest, GatewayError, Unknown
from caption_gateway.db.dependencies import get_supabase
from caption_gateway.db.supabase import SupabaseClient
from caption_gateway.schemas.auth import AuthenticatedUser
from caption_gateway.schemas.upload import UploadResponse
from caption_gateway.security import get_session_token, require_user
from caption_gateway.services.upload_service import UploadService

logger = logging.getLogger("caption_gateway.upload")

router = APIRouter(tags=["upload"])


def get_upload_service(
    supabase: SupabaseClient = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(supabase=supabase, settings=settings)


@router.post("/api/upload-image", response_model=UploadResponse)
@router.post("/api/v1/upload-image", response_model=UploadResponse)
async def upload_image(
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
    token: str = Depends(get_session_token),
    service: UploadService = Depends(get_upload_service),
) -> dict:
    try:
        async with request.form() as form:
            file = form.get("file")
            if not isinstance(file, UploadFile) or not file.filename:
                raise BadRequest("No file provided")

            # The parser has spooled the part already, so type and size are known before any read.
            service.validate(file.content_type, file.size or 0)
            raw = await file.read(service.settings.max_upload_bytes + 1)
            filename, content_type = file.filename, file.content_type
        return await service.save_upload(user, filename, content_type, raw, token=token)
    except GatewayError:
        raise
    except Exception as exc:
        logger.exception("Error uploading image")
        raise Unknown(str(exc) or "Failed to upload image") from exc
