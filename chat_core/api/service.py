"""对外服务模块：响应分发器。

ResponseDispatcher 根据模型 id 选择 Provider 适配器并返回统一的 ResponseStream，
调用方无需关心到底是哪个上游在应答。分发器本身无状态，每次调用互不影响；
唯一共享的是构造时读取的不可变配置。
"""

from typing import Dict, List, Optional

import httpx

from chat_core.config.settings import settings
from chat_core.domain.exceptions import BusinessError
from chat_core.domain.models import Conversation, ModelDescriptor
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers import ProviderClient, ProviderName, ResponseStream, classify_model, create_provider
from chat_core.providers.registry import FALLBACK_MODEL_ID, list_models


class ResponseDispatcher:
    """按模型 id 路由到对应 Provider 的流式分发器。

    Provider 实例在构造时一次性创建（此时读取凭证），之后只读。
    """

    def __init__(self, cfg=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        cfg = cfg or settings
        self._providers: Dict[ProviderName, ProviderClient] = {
            "openai": create_provider("openai", cfg, transport=transport),
            "anthropic": create_provider("anthropic", cfg, transport=transport),
        }

    def select(self, model: str) -> tuple[ProviderClient, str]:
        """返回 (Provider, 实际使用的模型 id)。

        只有模型 id 为空时才替换为 FALLBACK_MODEL_ID。
        """

        provider = self._providers[classify_model(model)]
        return provider, model or FALLBACK_MODEL_ID

    async def generate_response(self, messages: Conversation, model: str = "") -> ResponseStream:
        provider, resolved_model = self.select(model or "")
        logger.info(
            "dispatching chat request",
            extra={"extra": {
                "provider": provider.name,
                "model": resolved_model,
                "message_count": len(messages),
            }},
        )
        try:
            return await provider.open_stream(messages, resolved_model)
        except BusinessError as e:
            logger.warning(
                f"upstream request failed: {e.code}",
                extra={"extra": {
                    "provider": provider.name,
                    "model": resolved_model,
                    "code": e.code,
                    "upstream_status": e.extra.get("upstream_status"),
                }},
            )
            raise

    def get_available_models(self) -> List[ModelDescriptor]:
        return list_models()


_dispatcher: Optional[ResponseDispatcher] = None


def get_default_dispatcher() -> ResponseDispatcher:
    """获取默认的 ResponseDispatcher 实例（单例）。"""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ResponseDispatcher(settings)
    return _dispatcher
