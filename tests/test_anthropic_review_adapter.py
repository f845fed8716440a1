import json

import httpx
import pytest

from commit_mentor.adapters.outbound.anthropic_review_adapter import AnthropicReviewAdapter
from commit_mentor.application.services.review_request_builder import (
    FALLBACK_INSIGHT,
    ReviewRequestBuilder,
)
from commit_mentor.domain.errors import ReviewRequestError


def make_adapter(handler) -> AnthropicReviewAdapter:
    return AnthropicReviewAdapter(
        api_key="test-key",
        base_url="https://api.example.test/",
        model="test-model",
        max_tokens=123,
        transport=httpx.MockTransport(handler),
    )


class TestAnthropicReviewAdapter:

    @pytest.mark.asyncio
    async def test_request_shape_and_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": [{"type": "text", "text": "review"}]})

        data = await make_adapter(handler).request_review("please review")

        assert data == {"content": [{"type": "text", "text": "review"}]}
        assert seen["url"] == "https://api.example.test/v1/messages"
        assert seen["headers"]["x-api-key"] == "test-key"
        assert seen["headers"]["anthropic-version"] == "2023-06-01"
        assert seen["body"] == {
            "model": "test-model",
            "max_tokens": 123,
            "messages": [{"role": "user", "content": "please review"}],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,fragment", [
        (401, "인증 실패"),
        (403, "권한"),
        (429, "한도 초과"),
        (500, "500"),
    ])
    async def test_http_errors_become_review_errors(self, status, fragment):
        adapter = make_adapter(lambda request: httpx.Response(status, json={"error": {}}))

        with pytest.raises(ReviewRequestError, match=fragment):
            await adapter.request_review("x")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ReviewRequestError, match="연결 실패"):
            await make_adapter(handler).request_review("x")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ReviewRequestError, match="시간 초과"):
            await make_adapter(handler).request_review("x")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        adapter = make_adapter(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(ReviewRequestError, match="JSON"):
            await adapter.request_review("x")

    @pytest.mark.asyncio
    async def test_json_array_body_passes_through_to_fallback(self):
        adapter = make_adapter(lambda request: httpx.Response(200, json=[1, 2]))

        payload = await adapter.request_review("x")

        assert payload == [1, 2]
        assert ReviewRequestBuilder.parse_reply(payload) == FALLBACK_INSIGHT

    @pytest.mark.asyncio
    async def test_each_call_sends_exactly_one_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(ReviewRequestError):
            await make_adapter(handler).request_review("x")

        assert len(calls) == 1
