import asyncio
import json
import unittest

import httpx

from caption_gateway.core.errors import UpstreamFailure
from caption_gateway.services.caption_service import (
    MOCK_CAPTIONS,
    CaptionService,
    generate_mock_captions,
    normalize_captions,
)
from fakes import make_settings

CAPTION_API_URL = "https://captions.example.com/v1/generate"


def run_with_transport(settings, handler, image_url="https://img.example.com/cat.png", context=None):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            service = CaptionService(settings=settings, http=http)
            return await service.generate(image_url, context)

    return asyncio.run(_run())


class MockCaptionTests(unittest.TestCase):
    def test_without_context_returns_fixed_list(self) -> None:
        captions = generate_mock_captions()
        self.assertEqual(len(captions), 10)
        self.assertEqual([c["id"] for c in captions], list(range(1, 11)))
        self.assertEqual(captions[0]["text"], "When you realize it's only Tuesday")
        self.assertEqual(captions[1]["text"], "Me pretending to understand the assignment")

    def test_context_rewrites_first_two_entries_only(self) -> None:
        captions = generate_mock_captions("Monday")
        self.assertEqual(captions[0]["text"], "Monday: expectations vs reality")
        self.assertEqual(captions[1]["text"], "When monday hits different")
        self.assertEqual([c["text"] for c in captions[2:]], list(MOCK_CAPTIONS[2:]))

    def test_empty_context_is_ignored(self) -> None:
        self.assertEqual([c["text"] for c in generate_mock_captions("")], list(MOCK_CAPTIONS))

    def test_mock_list_is_not_mutated_between_calls(self) -> None:
        generate_mock_captions("Finals")
        self.assertEqual(generate_mock_captions()[0]["text"], MOCK_CAPTIONS[0])


class NormalizeCaptionTests(unittest.TestCase):
    def test_strings_and_objects_are_numbered_in_order(self) -> None:
        captions = normalize_captions({"captions": ["a", {"text": "b"}]})
        self.assertEqual(captions, [{"id": 1, "text": "a"}, {"id": 2, "text": "b"}])

    def test_falls_back_to_data_field(self) -> None:
        self.assertEqual(normalize_captions({"data": ["x"]}), [{"id": 1, "text": "x"}])

    def test_empty_captions_field_falls_through_to_data(self) -> None:
        self.assertEqual(normalize_captions({"captions": [], "data": ["y"]}), [{"id": 1, "text": "y"}])

    def test_missing_fields_yield_empty_list(self) -> None:
        self.assertEqual(normalize_captions({}), [])

    def test_non_list_payload_is_rejected(self) -> None:
        with self.assertRaises(UpstreamFailure):
            normalize_captions({"captions": "not a list"})
        with self.assertRaises(UpstreamFailure):
            normalize_captions(["a", "b"])


class CaptionServiceTests(unittest.TestCase):
    def test_mock_used_when_api_not_configured(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("caption API must not be called")

        captions = run_with_transport(make_settings(caption_api_url=CAPTION_API_URL), handler)
        self.assertEqual(len(captions), 10)

    def test_external_api_request_shape(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"captions": ["a", "b"]})

        settings = make_settings(caption_api_url=CAPTION_API_URL, caption_api_key="secret")
        captions = run_with_transport(settings, handler, context="Monday")

        self.assertEqual(captions, [{"id": 1, "text": "a"}, {"id": 2, "text": "b"}])
        self.assertEqual(seen["url"], CAPTION_API_URL)
        self.assertEqual(seen["auth"], "Bearer secret")
        self.assertEqual(
            seen["body"],
            {"image_url": "https://img.example.com/cat.png", "context": "Monday", "num_captions": 10},
        )

    def test_context_omitted_from_request_when_absent(self) -> None:
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": [{"text": "only"}]})

        settings = make_settings(caption_api_url=CAPTION_API_URL, caption_api_key="secret")
        run_with_transport(settings, handler)
        self.assertNotIn("context", bodies[0])

    def test_non_2xx_response_raises_generic_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        settings = make_settings(caption_api_url=CAPTION_API_URL, caption_api_key="secret")
        with self.assertRaises(UpstreamFailure) as ctx:
            run_with_transport(settings, handler)
        self.assertEqual(ctx.exception.message, "Failed to generate captions from external API")

    def test_timeout_is_reported_as_upstream_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        settings = make_settings(
            caption_api_url=CAPTION_API_URL,
            caption_api_key="secret",
            caption_api_timeout_seconds=2.5,
        )
        with self.assertRaises(UpstreamFailure) as ctx:
            run_with_transport(settings, handler)
        self.assertIn("timed out after 2.5s", ctx.exception.message)

    def test_invalid_json_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        settings = make_settings(caption_api_url=CAPTION_API_URL, caption_api_key="secret")
        with self.assertRaises(UpstreamFailure):
            run_with_transport(settings, handler)


if __name__ == "__main__":
    unittest.main()
