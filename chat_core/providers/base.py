"""Provider 抽象接口与共用的流式 HTTP 实现。

上层 ResponseDispatcher 不直接依赖具体厂商的请求格式，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 OpenAIClient、AnthropicClient）。
- build_payload：把统一的 Conversation 转成该厂商的请求 JSON。
- open_stream：发起流式请求，返回统一的 ResponseStream（原始字节流）。

无论哪个上游应答，调用方拿到的都是同一种 ResponseStream。
"""

from typing import AsyncIterator, Dict, Optional, Protocol

import httpx

from chat_core.domain.exceptions import ApiError, NetworkError, StreamInterruptedError
from chat_core.domain.models import Conversation


class ResponseStream:
    """上游流式响应体的只进、不可重放的字节迭代器。

    持有已打开的 httpx 响应及其 client；迭代结束、出错或调用方提前断开时，
    都会关闭上游连接。aclose() 可重复调用。
    """

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient, provider: str, model: str):
        self.provider = provider
        self.model = model
        self._response = response
        self._client = client
        self._consumed = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise RuntimeError("ResponseStream can only be consumed once")
        self._consumed = True
        return self._iter_bytes()

    async def _iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                if chunk:
                    yield chunk
        except httpx.RequestError as e:
            raise StreamInterruptedError(
                code="STREAM_INTERRUPTED",
                message=str(e) or type(e).__name__,
                http_status=502,
                provider=self.provider,
                model=self.model,
            ) from e
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - build_payload(messages, model): 纯函数，构造请求 JSON。
    - open_stream(messages, model): 发起流式请求，返回 ResponseStream。
    """

    name: str

    def build_payload(self, messages: Conversation, model: str) -> dict:
        ...

    async def open_stream(self, messages: Conversation, model: str) -> ResponseStream:
        ...


class StreamingHttpClient:
    """基于 httpx.AsyncClient 的流式请求骨架，子类只负责 URL/headers/payload。

    - 连接失败（DNS、连接超时等）抛 NetworkError。
    - 上游返回非 2xx 抛 ApiError，message 为上游原始响应体。
    - 不做任何重试。
    """

    name = ""

    def __init__(self, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._timeout = timeout
        # 测试时注入 httpx.MockTransport
        self._transport = transport

    def endpoint(self) -> str:
        raise NotImplementedError

    def headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def build_payload(self, messages: Conversation, model: str) -> dict:
        raise NotImplementedError

    async def open_stream(self, messages: Conversation, model: str) -> ResponseStream:
        payload = self.build_payload(messages, model)
        client = httpx.AsyncClient(timeout=self._timeout, trust_env=False, transport=self._transport)
        request = client.build_request(
            "POST",
            self.endpoint(),
            json=payload,
            headers={**self.headers(), "Content-Type": "application/json"},
        )
        try:
            resp = await client.send(request, stream=True)
        except httpx.RequestError as e:
            await client.aclose()
            raise NetworkError(
                code="NETWORK_ERROR",
                message=str(e) or type(e).__name__,
                http_status=503,
                provider=self.name,
            ) from e
        except BaseException:
            # 例如调用方断开导致的取消
            await client.aclose()
            raise

        if not resp.is_success:
            try:
                body = await resp.aread()
            except httpx.RequestError:
                body = b""
            finally:
                await resp.aclose()
                await client.aclose()
            raise ApiError(
                code="API_ERROR",
                message=body.decode("utf-8", errors="replace"),
                http_status=502,
                provider=self.name,
                upstream_status=resp.status_code,
            )
        return ResponseStream(resp, client, provider=self.name, model=model)
