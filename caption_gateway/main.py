import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from caption_gateway.api.v1.router import api_router
from caption_gateway.core.config import Settings, get_settings
from caption_gateway.core.errors import register_exception_handlers
from caption_gateway.core.logging import configure_logging

logger = logging.getLogger("caption_gateway")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)
    app.dependency_overrides[get_settings] = lambda: settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)

    if not settings.supabase_configured:
        logger.warning("Supabase credentials not configured; authenticated routes will fail")
    logger.info("Caption source: %s", "external API" if settings.caption_api_enabled else "mock captions")
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "caption_gateway.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
    )


if __name__ == "__main__":
    run()
