"""统一的对话数据模型。

本模块定义了在不同 Provider 之间共享的标准数据结构：

- ChatMessage: 一条对话消息（user/assistant）。
- Conversation: 按时间顺序（最早在前）排列的消息列表。
- ModelDescriptor: 模型目录中的一项（id + 展示名）。

所有 Provider 适配器都只依赖这些模型，
并负责把它们转换成各自 API 的请求体。
"""

from dataclasses import dataclass
from typing import List, Literal, get_args


# 对话消息角色（与 OpenAI / Anthropic 的 role 字段对应）
Role = Literal["user", "assistant"]

ROLES = frozenset(get_args(Role))


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息，构造后不可变。

    content 允许为空字符串：核心层不校验，交给上游处理。
    """

    role: Role
    content: str


Conversation = List[ChatMessage]


@dataclass(frozen=True)
class ModelDescriptor:
    """模型目录项。

    - id: 稳定的模型标识，同时决定路由到哪个 Provider。
    - name: 给前端下拉框展示的名称。
    """

    id: str
    name: str
