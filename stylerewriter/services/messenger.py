from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

import requests

from stylerewriter.config import DEFAULT_RELAY_URL
from stylerewriter.results import (
    FailureKind,
    RewriteFailure,
    RewriteRequest,
    RewriteResult,
    RewriteSuccess,
)

logger = logging.getLogger(__name__)

REWRITE_ACTION = "rewrite"


class RelayMessenger:
    """Answers ``{action: "rewrite", payload}`` messages by calling the relay."""

    def __init__(self, *, relay_url: str = DEFAULT_RELAY_URL, timeout_seconds: int = 60) -> None:
        self._relay_url = (relay_url or "").strip()
        if not self._relay_url:
            raise RuntimeError("Relay URL is required.")
        self._timeout_seconds = max(1, int(timeout_seconds))

    def handle(self, message: Any) -> dict[str, object] | None:
        if not isinstance(message, dict) or message.get("action") != REWRITE_ACTION:
            return None
        payload = message.get("payload")
        if not isinstance(payload, dict):
            payload = {}
        try:
            response = requests.post(
                self._relay_url,
                headers={"Content-Type": "application/json"},
                json=payload,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.warning("Relay request failed: %s", exc)
            return {"ok": False, "error": str(exc)}

        if not response.ok:
            return {
                "ok": False,
                "status": response.status_code,
                "statusText": response.reason or "",
                "body": response.text,
            }
        try:
            data = response.json()
        except ValueError:
            return {"ok": False, "error": "Relay returned non-JSON payload."}
        return {"ok": True, "data": data}


class RemoteRewriter:
    """Rewriter that goes through the messenger and the HTTP relay."""

    def __init__(self, messenger: RelayMessenger) -> None:
        self._messenger = messenger

    def rewrite(self, request: RewriteRequest) -> RewriteResult:
        if request.is_blank():
            return RewriteFailure(
                kind=FailureKind.VALIDATION_ERROR,
                detail="original_text required",
            )
        style = {key: value for key, value in asdict(request.style_profile).items() if value}
        reply = self._messenger.handle(
            {
                "action": REWRITE_ACTION,
                "payload": {
                    "original_text": request.original_text,
                    "style_profile": style,
                },
            }
        )
        return _result_from_reply(reply)


def _result_from_reply(reply: dict[str, object] | None) -> RewriteResult:
    if not isinstance(reply, dict):
        return RewriteFailure(kind=FailureKind.MALFORMED_RESPONSE, detail="no reply")
    if reply.get("ok"):
        data = reply.get("data")
        text = data.get("rewritten_text") if isinstance(data, dict) else None
        if isinstance(text, str) and text.strip():
            return RewriteSuccess(rewritten_text=text.strip())
        return RewriteFailure(
            kind=FailureKind.MALFORMED_RESPONSE,
            detail="No rewritten text returned from server.",
        )
    status = reply.get("status")
    if isinstance(status, int):
        kind = FailureKind.PROVIDER_ERROR
        if status == 400:
            kind = FailureKind.VALIDATION_ERROR
        return RewriteFailure(kind=kind, detail=str(reply.get("body") or ""), status=status)
    return RewriteFailure(
        kind=FailureKind.TRANSPORT_ERROR,
        detail=str(reply.get("error") or "request failed"),
    )
