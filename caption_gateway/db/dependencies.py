from collections.abc import AsyncGenerator

import httpx
from fastapi import Depends

from caption_gateway.core.config import Settings, get_settings
from caption_gateway.db.supabase import SupabaseClient


async def get_supabase(settings: Settings = Depends(get_settings)) -> AsyncGenerator[SupabaseClient, None]:
    async with httpx.AsyncClient(timeout=settings.supabase_timeout_seconds) as http:
        yield SupabaseClient(settings.supabase_url, settings.supabase_anon_key, http)
