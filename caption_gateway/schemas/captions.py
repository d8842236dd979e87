from pydantic import BaseModel, ConfigDict, Field


class CaptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl")
    context: str | None = None


class GeneratedCaption(BaseModel):
    id: int = Field(gt=0)
    text: str


class CaptionResponse(BaseModel):
    success: bool
    image_url: str = Field(serialization_alias="imageUrl")
    context: str | None = None
    captions: list[GeneratedCaption]
