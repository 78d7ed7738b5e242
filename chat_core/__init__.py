"""Chat Core 顶层包。

该包提供多模型聊天后端的核心实现：模型目录、按模型 id 路由的
流式响应分发器，以及把上游字节流原样转发给浏览器的 HTTP 传输层。
"""

from chat_core.domain.models import ChatMessage, ModelDescriptor

__all__ = ["ChatMessage", "ModelDescriptor"]
