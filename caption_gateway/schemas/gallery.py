from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ImagesResponse(BaseModel):
    success: bool
    count: int
    images: list[dict]


class CaptionsListResponse(BaseModel):
    success: bool
    captions: list[dict]


class VoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # 1 upvote, -1 downvote, 0 skip
    vote_value: Literal[-1, 0, 1] = Field(alias="voteValue")


class VoteResponse(BaseModel):
    success: bool
    vote: dict


class ClientConfigResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    supabase_configured: bool = Field(serialization_alias="supabaseConfigured")
    oauth_enabled: bool = Field(serialization_alias="oauthEnabled")
    caption_source: Literal["external", "mock"] = Field(serialization_alias="captionSource")
