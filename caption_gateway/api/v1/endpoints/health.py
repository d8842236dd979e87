from fastapi import APIRouter, Depends

from caption_gateway.core.config import Settings, get_settings
from caption_gateway.schemas.gallery import ClientConfigResponse

router = APIRouter(tags=["health"])


@router.get("/health")
@router.get("/api/health")
@router.get("/api/v1/health")
async def health_check(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "status": "healthy",
        "service": settings.app_name,
        "environment": settings.app_env,
    }


@router.get("/api/config", response_model=ClientConfigResponse)
@router.get("/api/v1/config", response_model=ClientConfigResponse)
async def client_config(settings: Settings = Depends(get_settings)) -> dict:
    """Feature flags the frontend needs before it can render."""
    return {
        "supabase_configured": settings.supabase_configured,
        "oauth_enabled": settings.oauth_enabled,
        "caption_source": "external" if settings.caption_api_enabled else "mock",
    }
