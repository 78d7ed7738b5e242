"""Anthropic Provider 适配器。

使用旧版 completion 接口，对话需要先拍平成单个 prompt 字符串：

    user: 你好
    assistant: 你好！
    user: 再见
    assistant:

最后追加的 "assistant:" 提示模型接着写回答。
"""

from typing import Dict, Optional

import httpx

from chat_core.config.settings import settings
from chat_core.domain.models import Conversation
from chat_core.providers.base import StreamingHttpClient
from chat_core.providers.registry import ANTHROPIC_CONFIG


def build_prompt(messages: Conversation) -> str:
    """把对话拍平为 "{role}: {content}" 行，并以 "\\nassistant:" 结尾。"""

    return "\n".join(f"{m.role}: {m.content}" for m in messages) + "\nassistant:"


class AnthropicClient(StreamingHttpClient):
    """Anthropic completion 接口客户端。"""

    name = "anthropic"

    def __init__(self, cfg=settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout=cfg.http_timeout, transport=transport)
        self._api_key = getattr(cfg, "anthropic_api_key", None) or ""
        base = getattr(cfg, "anthropic_base_url", None) or ANTHROPIC_CONFIG.base_url
        self._base_url = base.rstrip("/")
        self._max_tokens = getattr(cfg, "anthropic_max_tokens_to_sample", 1000)

    def endpoint(self) -> str:
        return f"{self._base_url}{ANTHROPIC_CONFIG.path}"

    def headers(self) -> Dict[str, str]:
        return {"X-API-Key": self._api_key}

    def build_payload(self, messages: Conversation, model: str) -> dict:
        return {
            "prompt": build_prompt(messages),
            "model": model,
            "max_tokens_to_sample": self._max_tokens,
            "stream": True,
        }
