from fastapi import APIRouter

from caption_gateway.api.v1.endpoints.captions import router as captions_router
from caption_gateway.api.v1.endpoints.gallery import router as gallery_router
from caption_gateway.api.v1.endpoints.health import router as health_router
from caption_gateway.api.v1.endpoints.upload import router as upload_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(upload_router)
api_router.include_router(captions_router)
api_router.include_router(gallery_router)
