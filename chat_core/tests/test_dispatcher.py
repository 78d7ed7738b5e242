import json

import httpx
import pytest

from chat_core.api.service import ResponseDispatcher
from chat_core.domain.exceptions import ApiError, NetworkError
from chat_core.domain.models import ChatMessage
from chat_core.providers import classify_model, create_provider
from chat_core.providers.anthropic_client import AnthropicClient
from chat_core.providers.openai_client import OpenAIClient
from stubs import Recorder, SettingsStub, chunked, drain, run


HELLO = [ChatMessage(role="user", content="Hello")]


@pytest.mark.parametrize(
    "model_id, expected",
    [
        ("claude-v1", "anthropic"),
        ("claude-instant-v1", "anthropic"),
        ("gpt-3.5-turbo", "openai"),
        ("gpt-4", "openai"),
        ("text-davinci-003", "openai"),
        ("my-claude-v1", "openai"),
        ("", "openai"),
    ],
)
def test_classify_model(model_id, expected):
    assert classify_model(model_id) == expected


def test_create_provider():
    assert isinstance(create_provider("anthropic", SettingsStub()), AnthropicClient)
    assert isinstance(create_provider("openai", SettingsStub()), OpenAIClient)


def test_select_empty_model_uses_fallback():
    dispatcher = ResponseDispatcher(SettingsStub())
    provider, model = dispatcher.select("")
    assert provider.name == "openai"
    assert model == "gpt-3.5-turbo"


def test_select_keeps_non_empty_model():
    dispatcher = ResponseDispatcher(SettingsStub())
    provider, model = dispatcher.select("text-curie-001")
    assert provider.name == "openai"
    assert model == "text-curie-001"
    provider, model = dispatcher.select("claude-v1")
    assert provider.name == "anthropic"
    assert model == "claude-v1"


def test_dispatch_default_goes_to_openai():
    rec = Recorder(lambda request: httpx.Response(200, content=b"data: [DONE]\n\n"))
    dispatcher = ResponseDispatcher(SettingsStub(), transport=rec.transport)

    async def go():
        stream = await dispatcher.generate_response(HELLO, "")
        return await drain(stream)

    assert run(go()) == b"data: [DONE]\n\n"
    req = rec.requests[0]
    assert req.url.host == "api.openai.test"
    body = json.loads(req.content)
    assert body["model"] == "gpt-3.5-turbo"
    assert body["messages"] == [{"role": "user", "content": "Hello"}]


def test_dispatch_claude_goes_to_anthropic():
    rec = Recorder(lambda request: httpx.Response(200, content=b"ok"))
    dispatcher = ResponseDispatcher(SettingsStub(), transport=rec.transport)

    async def go():
        stream = await dispatcher.generate_response(HELLO, "claude-v1")
        return await drain(stream)

    run(go())
    req = rec.requests[0]
    assert req.url.host == "api.anthropic.test"
    body = json.loads(req.content)
    assert body["prompt"] == "user: Hello\nassistant:"
    assert body["model"] == "claude-v1"


def test_dispatch_output_is_byte_identical():
    parts = [bytes([i]) * 7 for i in range(256)] + ["中文字节".encode("utf-8")]
    rec = Recorder(lambda request: httpx.Response(200, content=chunked(*parts)))
    dispatcher = ResponseDispatcher(SettingsStub(), transport=rec.transport)

    async def go():
        stream = await dispatcher.generate_response(HELLO, "gpt-4")
        return await drain(stream)

    assert run(go()) == b"".join(parts)


def test_dispatch_upstream_rejection():
    rec = Recorder(lambda request: httpx.Response(429, text="quota exceeded"))
    dispatcher = ResponseDispatcher(SettingsStub(), transport=rec.transport)

    with pytest.raises(ApiError) as info:
        run(dispatcher.generate_response(HELLO, "gpt-4"))
    assert info.value.extra["upstream_status"] == 429
    assert info.value.message == "quota exceeded"
    # 不重试
    assert len(rec.requests) == 1


def test_dispatch_network_failure_distinct_from_rejection():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    dispatcher = ResponseDispatcher(SettingsStub(), transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as info:
        run(dispatcher.generate_response(HELLO, "claude-v1"))
    assert not isinstance(info.value, ApiError)
    assert info.value.extra["provider"] == "anthropic"


def test_credentials_read_once_at_construction():
    cfg = SettingsStub()
    cfg.openai_api_key = "sk-first"
    rec = Recorder(lambda request: httpx.Response(200, content=b""))
    dispatcher = ResponseDispatcher(cfg, transport=rec.transport)
    cfg.openai_api_key = "sk-changed"

    async def go():
        await drain(await dispatcher.generate_response(HELLO, "gpt-4"))

    run(go())
    assert rec.requests[0].headers["Authorization"] == "Bearer sk-first"


def test_available_models():
    dispatcher = ResponseDispatcher(SettingsStub())
    assert dispatcher.get_available_models()[0].id == "gpt-3.5-turbo"
