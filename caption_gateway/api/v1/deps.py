from fastapi import Request
from pydantic import BaseModel, ValidationError

from caption_gateway.core.errors import BadRequest


async def read_json_object(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError as exc:
        raise BadRequest("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise BadRequest("Invalid JSON body")
    return body


def parse_body(model: type[BaseModel], body: dict) -> BaseModel:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise BadRequest(f"{location}: {first.get('msg', 'Invalid value')}" if location else "Invalid request body") from exc
