from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from stylerewriter.config import DEFAULT_TONE


class FailureKind(str, Enum):
    VALIDATION_ERROR = "validation-error"
    PROVIDER_ERROR = "provider-error"
    MALFORMED_RESPONSE = "malformed-response"
    TRANSPORT_ERROR = "transport-error"
    RESOLUTION_FAILURE = "resolution-failure"
    CLIPBOARD_FALLBACK_USED = "clipboard-fallback-used"
    TOTAL_FAILURE = "total-failure"


@dataclass(frozen=True)
class StyleProfile:
    tone: str = DEFAULT_TONE
    signature: str | None = None
    custom_instructions: str | None = None


@dataclass(frozen=True)
class RewriteRequest:
    original_text: str
    style_profile: StyleProfile = StyleProfile()

    def is_blank(self) -> bool:
        return not (self.original_text or "").strip()


@dataclass(frozen=True)
class RewriteSuccess:
    rewritten_text: str
    ok = True


@dataclass(frozen=True)
class RewriteFailure:
    kind: FailureKind
    detail: str = ""
    status: int | None = None
    ok = False


RewriteResult = Union[RewriteSuccess, RewriteFailure]
