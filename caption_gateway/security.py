from fastapi import Depends, Header, Request

from caption_gateway.core.config import Settings, get_settings
from caption_gateway.core.errors import Unauthorized, UpstreamFailure
from caption_gateway.db.dependencies import get_supabase
from caption_gateway.db.supabase import NOT_CONFIGURED_MESSAGE, SupabaseClient
from caption_gateway.schemas.auth import AuthenticatedUser


def _parse_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    # Non-Bearer schemes (e.g. proxy Basic auth) leave the session to the cookie.
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


async def get_session_token(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
) -> str:
    token = _parse_bearer_token(authorization) or (request.cookies.get(settings.session_cookie_name) or "").strip()
    if not token:
        raise Unauthorized()
    return token


async def require_user(
    token: str = Depends(get_session_token),
    supabase: SupabaseClient = Depends(get_supabase),
) -> AuthenticatedUser:
    if not supabase.configured:
        raise UpstreamFailure(NOT_CONFIGURED_MESSAGE)
    user = await supabase.get_user(token)
    if user is None:
        raise Unauthorized()
    return user
