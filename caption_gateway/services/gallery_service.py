import logging

from caption_gateway.core.config import Settings
from caption_gateway.db.supabase import SupabaseClient
from caption_gateway.schemas.auth import AuthenticatedUser

logger = logging.getLogger("caption_gateway.gallery")


class GalleryService:
    def __init__(self, supabase: SupabaseClient, settings: Settings):
        self.supabase = supabase
        self.settings = settings

    async def list_images(self) -> dict:
        images = await self.supabase.select("images", limit=self.settings.gallery_limit)
        return {"success": True, "count": len(images), "images": images}

    async def list_captions(self, token: str | None = None) -> dict:
        captions = await self.supabase.select("captions", limit=self.settings.rate_captions_limit, token=token)
        return {"success": True, "captions": captions}

    async def cast_vote(self, user: AuthenticatedUser, caption_id: int, vote_value: int, token: str | None = None) -> dict:
        vote = await self.supabase.insert(
            "caption_votes",
            {"caption_id": caption_id, "profile_id": user.id, "vote_value": vote_value},
            token=token,
        )
        logger.info("User %s voted %s on caption %s", user.id, vote_value, caption_id)
        return {"success": True, "vote": vote}
