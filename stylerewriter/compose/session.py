from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

from stylerewriter.results import (
    FailureKind,
    RewriteFailure,
    RewriteRequest,
    RewriteResult,
    RewriteSuccess,
    StyleProfile,
)

from .focus import resolve
from .page import EditableRegion, HostDocument
from .replacer import ReplaceOutcome, TextReplacer

logger = logging.getLogger(__name__)


class Rewriter(Protocol):
    def rewrite(self, request: RewriteRequest) -> RewriteResult: ...


@dataclass(frozen=True)
class SessionOutcome:
    token: int
    region: EditableRegion | None
    result: RewriteResult
    replacement: ReplaceOutcome | None = None
    stale: bool = False

    @property
    def manual_copy_text(self) -> str | None:
        """Rewritten text the user has to copy by hand, if any."""
        if not isinstance(self.result, RewriteSuccess) or self.stale:
            return None
        if self.replacement is not None and self.replacement.verified:
            return None
        return self.result.rewritten_text


class RewriteSession:
    """Runs one rewrite per user action: resolve, relay, write back.

    Each ``start`` takes a fresh request token. A response arriving for a
    token older than the newest one is reported as stale and never written
    into the page.
    """

    def __init__(
        self,
        *,
        rewriter: Rewriter,
        replacer_factory=TextReplacer,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._rewriter = rewriter
        self._replacer_factory = replacer_factory
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="rewrite"
        )
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._in_flight > 0

    def start(self, document: HostDocument, style: StyleProfile) -> "Future[SessionOutcome]":
        with self._lock:
            token = next(self._tokens)
            self._latest_token = token

        try:
            region = resolve(document)
            draft = region.read_text() if region is not None else ""
        except Exception as exc:
            logger.warning("Compose box lookup failed: %s", exc)
            region = None
        if region is None:
            return _done(
                SessionOutcome(
                    token=token,
                    region=None,
                    result=RewriteFailure(
                        kind=FailureKind.RESOLUTION_FAILURE,
                        detail="Could not find compose textbox.",
                    ),
                )
            )

        request = RewriteRequest(original_text=draft, style_profile=style)
        if request.is_blank():
            return _done(
                SessionOutcome(
                    token=token,
                    region=region,
                    result=RewriteFailure(
                        kind=FailureKind.VALIDATION_ERROR,
                        detail="Compose box is empty.",
                    ),
                )
            )

        with self._lock:
            self._in_flight += 1
        return self._executor.submit(self._run, token, document, region, request)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _run(
        self,
        token: int,
        document: HostDocument,
        region: EditableRegion,
        request: RewriteRequest,
    ) -> SessionOutcome:
        try:
            return self._rewrite_and_apply(token, document, region, request)
        finally:
            with self._lock:
                self._in_flight -= 1

    def _rewrite_and_apply(
        self,
        token: int,
        document: HostDocument,
        region: EditableRegion,
        request: RewriteRequest,
    ) -> SessionOutcome:
        result = self._rewriter.rewrite(request)
        if not isinstance(result, RewriteSuccess):
            return SessionOutcome(token=token, region=region, result=result)

        with self._lock:
            stale = token != self._latest_token
        if stale:
            logger.info("Dropping stale rewrite response (token %d)", token)
            return SessionOutcome(token=token, region=region, result=result, stale=True)

        replacement = self._replacer_factory(document).replace(region, result.rewritten_text)
        return SessionOutcome(
            token=token,
            region=region,
            result=result,
            replacement=replacement,
        )


def _done(outcome: SessionOutcome) -> "Future[SessionOutcome]":
    future: Future = Future()
    future.set_result(outcome)
    return future
