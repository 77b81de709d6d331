from __future__ import annotations

from dataclasses import dataclass

import requests


class ChatCompletionError(RuntimeError):
    pass


class MissingCredentialError(ChatCompletionError):
    pass


class ProviderStatusError(ChatCompletionError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"LLM completion failed ({status}): {body[:400] or 'request failed'}")
        self.status = status
        self.body = body


class MalformedCompletionError(ChatCompletionError):
    pass


@dataclass(frozen=True)
class OpenAICompatibleConfig:
    provider: str
    model: str
    api_key: str | None
    timeout_seconds: int
    api_base_url: str | None = None


class OpenAICompatibleClient:
    def __init__(self, cfg: OpenAICompatibleConfig) -> None:
        provider = (cfg.provider or "").strip().lower()
        if provider not in {"groq", "openai", "openai_compatible"}:
            raise ValueError("provider must be one of: groq, openai, openai_compatible")

        self._provider = provider
        self._model = (cfg.model or "").strip()
        if not self._model:
            raise RuntimeError("LLM model is required.")

        # A missing key is reported per call so the relay can still boot.
        self._api_key = (cfg.api_key or "").strip()
        self._timeout_seconds = max(1, int(cfg.timeout_seconds))
        base = (cfg.api_base_url or "").strip()
        if not base:
            if provider == "groq":
                base = "https://api.groq.com/openai/v1"
            else:
                base = "https://api.openai.com/v1"
        self._base_url = base.rstrip("/")

    @property
    def model(self) -> str:
        return self._model

    def has_credential(self) -> bool:
        return bool(self._api_key)

    def complete(
        self,
        *,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one chat completion and return the first message's text.

        Raises ``MissingCredentialError`` before any network activity when no
        key is configured, ``ProviderStatusError`` on non-2xx responses and
        ``MalformedCompletionError`` when the payload lacks the message text.
        Transport failures surface as ``requests.RequestException``.
        """
        if not self._api_key:
            raise MissingCredentialError("provider credential is not configured")
        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        response = requests.post(
            f"{self._base_url}/chat/completions",
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self._timeout_seconds,
        )
        if not response.ok:
            raise ProviderStatusError(response.status_code, response.text.strip())
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedCompletionError("LLM completion returned non-JSON payload.") from exc
        return extract_message_text(body)


def extract_message_text(body: object) -> str:
    if not isinstance(body, dict):
        raise MalformedCompletionError("LLM completion returned unexpected payload.")
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedCompletionError("LLM completion returned no choices.")
    row = choices[0]
    if not isinstance(row, dict):
        raise MalformedCompletionError("LLM completion returned malformed choice row.")
    message = row.get("message")
    if not isinstance(message, dict):
        raise MalformedCompletionError("LLM completion missing message payload.")
    content = message.get("content")
    if isinstance(content, list):
        chunks: list[str] = []
        for part in content:
            if not isinstance(part, dict):
                continue
            chunk = str(part.get("text", "")).strip()
            if chunk:
                chunks.append(chunk)
        content = "\n".join(chunks)
    if isinstance(content, str) and content.strip():
        return content.strip()
    raise MalformedCompletionError("LLM completion missing content.")
