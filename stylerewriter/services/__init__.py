from .llm_client import OpenAICompatibleClient, OpenAICompatibleConfig
from .messenger import RelayMessenger, RemoteRewriter
from .relay import RewriteRelay

__all__ = [
    "OpenAICompatibleClient",
    "OpenAICompatibleConfig",
    "RelayMessenger",
    "RemoteRewriter",
    "RewriteRelay",
]
