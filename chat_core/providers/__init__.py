"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口与共用的流式 HTTP 实现 (base)。
- 维护模型目录与 Provider 配置 (registry)。
- 提供各厂商的具体实现 (openai_client、anthropic_client)。
"""

from typing import Literal, Optional

import httpx

from chat_core.config.settings import settings
from chat_core.providers.anthropic_client import AnthropicClient
from chat_core.providers.base import ProviderClient, ResponseStream
from chat_core.providers.openai_client import OpenAIClient
from chat_core.providers.registry import PROVIDER_REGISTRY


ProviderName = Literal["openai", "anthropic"]


def classify_model(model_id: str) -> ProviderName:
    """按命名约定判断模型属于哪个 Provider。

    依次匹配 PROVIDER_REGISTRY 中的模型前缀：以 "claude" 开头的走 Anthropic，
    其余（包括空串）落到没有前缀的兜底 Provider，即 OpenAI。
    """

    for name, cfg in PROVIDER_REGISTRY.items():
        if not cfg.model_prefix or (model_id and model_id.startswith(cfg.model_prefix)):
            return name
    return "openai"


def create_provider(
    name: ProviderName,
    cfg=None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProviderClient:
    """根据名称创建 Provider 实例。"""

    cfg = cfg or settings
    if name == "anthropic":
        return AnthropicClient(cfg, transport=transport)
    return OpenAIClient(cfg, transport=transport)


__all__ = [
    "ProviderClient",
    "ProviderName",
    "ResponseStream",
    "classify_model",
    "create_provider",
]
