from fastapi import APIRouter, Depends, Request

from caption_gateway.api.v1.deps import parse_body, read_json_object
from caption_gateway.core.config import Settings, get_settings
from caption_gateway.db.dependencies import get_supabase
from caption_gateway.db.supabase import SupabaseClient
from caption_gateway.schemas.auth import AuthenticatedUser
from caption_gateway.schemas.gallery import CaptionsListResponse, ImagesResponse, VoteRequest, VoteResponse
from caption_gateway.security import get_session_token, require_user
from caption_gateway.services.gallery_service import GalleryService

router = APIRouter(tags=["gallery"])


def get_gallery_service(
    supabase: SupabaseClient = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
) -> GalleryService:
    return GalleryService(supabase=supabase, settings=settings)


@router.get("/api/images", response_model=ImagesResponse)
@router.get("/api/v1/images", response_model=ImagesResponse)
async def list_images(service: GalleryService = Depends(get_gallery_service)) -> dict:
    return await service.list_images()


@router.get("/api/captions", response_model=CaptionsListResponse)
@router.get("/api/v1/captions", response_model=CaptionsListResponse)
async def list_captions(
    user: AuthenticatedUser = Depends(require_user),
    token: str = Depends(get_session_token),
    service: GalleryService = Depends(get_gallery_service),
) -> dict:
    return await service.list_captions(token=token)


@router.post("/api/captions/{caption_id}/votes", response_model=VoteResponse)
@router.post("/api/v1/captions/{caption_id}/votes", response_model=VoteResponse)
async def vote_on_caption(
    caption_id: int,
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
    token: str = Depends(get_session_token),
    service: GalleryService = Depends(get_gallery_service),
) -> dict:
    payload: VoteRequest = parse_body(VoteRequest, await read_json_object(request))
    return await service.cast_vote(user, caption_id, payload.vote_value, token=token)
