"""Provider 与模型目录配置。

本模块集中维护两类静态信息：

- MODEL_CATALOG：前端可选的模型列表（id + 展示名），进程启动时构造，之后不可变。
- ProviderConfig：每个上游厂商的接口地址与模型前缀。

目录只用于展示和默认值选择，不做白名单校验：未知的模型 id 会原样
转发给上游，由上游决定是否拒绝。
"""

from dataclasses import dataclass
from typing import List, Mapping, Tuple

from chat_core.domain.models import ModelDescriptor


@dataclass(frozen=True)
class ProviderConfig:
    """某个 Provider 的接口配置。"""

    name: str
    base_url: str
    path: str
    # 以该前缀开头的模型 id 路由到此 Provider；空串表示兜底 Provider
    model_prefix: str = ""


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    path="/chat/completions",
)

ANTHROPIC_CONFIG = ProviderConfig(
    name="anthropic",
    base_url="https://api.anthropic.com",
    path="/v1/complete",
    model_prefix="claude",
)


# 按顺序匹配模型前缀；没有前缀的条目是兜底 Provider，放在最后
PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "anthropic": ANTHROPIC_CONFIG,
    "openai": OPENAI_CONFIG,
}

# 调用方没有给出模型 id 时使用
FALLBACK_MODEL_ID = "gpt-3.5-turbo"

MODEL_CATALOG: Tuple[ModelDescriptor, ...] = (
    ModelDescriptor(id="gpt-3.5-turbo", name="GPT 3.5 Turbo"),
    ModelDescriptor(id="gpt-4", name="GPT-4"),
    ModelDescriptor(id="claude-v1", name="Claude v1"),
    ModelDescriptor(id="claude-instant-v1", name="Claude Instant v1"),
    ModelDescriptor(id="text-davinci-003", name="Davinci"),
    ModelDescriptor(id="text-curie-001", name="Curie"),
)


def list_models() -> List[ModelDescriptor]:
    """返回完整模型目录（每次都是新列表，调用方修改不会影响目录本身）。"""

    return list(MODEL_CATALOG)


def resolve_default() -> ModelDescriptor:
    """返回目录中的第一项，作为默认模型。"""

    return MODEL_CATALOG[0]
