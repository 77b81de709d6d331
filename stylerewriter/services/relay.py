from __future__ import annotations

import logging

import requests

from stylerewriter.results import (
    FailureKind,
    RewriteFailure,
    RewriteRequest,
    RewriteResult,
    RewriteSuccess,
)

from .llm_client import (
    MalformedCompletionError,
    MissingCredentialError,
    OpenAICompatibleClient,
    ProviderStatusError,
)
from .prompt import build_messages

logger = logging.getLogger(__name__)


class RewriteRelay:
    """Turns a rewrite request into one provider call.

    ``rewrite`` never raises: every failure comes back as a
    ``RewriteFailure`` so callers can surface it or let the user retry.
    """

    def __init__(
        self,
        *,
        llm: OpenAICompatibleClient,
        max_tokens: int = 800,
        temperature: float = 0.4,
        length_tolerance_percent: int = 25,
    ) -> None:
        self._llm = llm
        self._max_tokens = max(1, int(max_tokens))
        self._temperature = float(temperature)
        self._length_tolerance_percent = int(length_tolerance_percent)

    def rewrite(self, request: RewriteRequest) -> RewriteResult:
        if request.is_blank():
            return RewriteFailure(
                kind=FailureKind.VALIDATION_ERROR,
                detail="original_text required",
            )

        messages = build_messages(
            request,
            length_tolerance_percent=self._length_tolerance_percent,
        )
        try:
            text = self._llm.complete(
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except MissingCredentialError as exc:
            logger.warning("Rewrite refused: %s", exc)
            return RewriteFailure(kind=FailureKind.PROVIDER_ERROR, detail=str(exc))
        except ProviderStatusError as exc:
            logger.warning("Provider returned %s: %s", exc.status, exc.body[:200])
            return RewriteFailure(
                kind=FailureKind.PROVIDER_ERROR,
                detail=exc.body,
                status=exc.status,
            )
        except MalformedCompletionError as exc:
            logger.warning("Provider response malformed: %s", exc)
            return RewriteFailure(kind=FailureKind.MALFORMED_RESPONSE, detail=str(exc))
        except requests.RequestException as exc:
            logger.warning("Provider unreachable: %s", exc)
            return RewriteFailure(kind=FailureKind.TRANSPORT_ERROR, detail=str(exc))

        logger.debug(
            "Rewrote draft (%d chars -> %d chars)",
            len(request.original_text),
            len(text),
        )
        return RewriteSuccess(rewritten_text=text)
