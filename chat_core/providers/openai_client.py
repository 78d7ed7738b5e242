"""OpenAI Provider 适配器。

- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>
- 请求体: {model, stream: true, messages: [{role, content}]}

响应体（SSE 文本）不做解析，原样交给调用方。
"""

from typing import Dict, Optional

import httpx

from chat_core.config.settings import settings
from chat_core.domain.models import Conversation
from chat_core.providers.base import StreamingHttpClient
from chat_core.providers.registry import OPENAI_CONFIG


class OpenAIClient(StreamingHttpClient):
    """OpenAI 兼容接口客户端。"""

    name = "openai"

    def __init__(self, cfg=settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout=cfg.http_timeout, transport=transport)
        # 凭证只在构造时读取一次；为空也照常发请求，由上游返回 401
        self._api_key = getattr(cfg, "openai_api_key", None) or ""
        base = getattr(cfg, "openai_base_url", None) or OPENAI_CONFIG.base_url
        self._base_url = base.rstrip("/")

    def endpoint(self) -> str:
        return f"{self._base_url}{OPENAI_CONFIG.path}"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def build_payload(self, messages: Conversation, model: str) -> dict:
        return {
            "model": model,
            "stream": True,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
