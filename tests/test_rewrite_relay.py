import unittest
from unittest.mock import MagicMock, patch

import requests

from stylerewriter.results import (
    FailureKind,
    RewriteFailure,
    RewriteRequest,
    RewriteSuccess,
    StyleProfile,
)
from stylerewriter.services.llm_client import OpenAICompatibleClient, OpenAICompatibleConfig
from stylerewriter.services.relay import RewriteRelay


def _relay(api_key: str | None = "sk-test") -> RewriteRelay:
    llm = OpenAICompatibleClient(
        OpenAICompatibleConfig(
            provider="openai",
            model="gpt-4o-mini",
            api_key=api_key,
            timeout_seconds=5,
        )
    )
    return RewriteRelay(llm=llm, max_tokens=800)


def _response(status: int, *, body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


class RewriteRelayTests(unittest.TestCase):
    @patch("stylerewriter.services.llm_client.requests.post")
    def test_success_returns_trimmed_message_content(self, mock_post):
        mock_post.return_value = _response(
            200, body={"choices": [{"message": {"content": "Hi there"}}]}
        )

        result = _relay().rewrite(
            RewriteRequest(original_text="Hello", style_profile=StyleProfile(tone="formal"))
        )

        self.assertEqual(result, RewriteSuccess(rewritten_text="Hi there"))
        kwargs = mock_post.call_args.kwargs
        self.assertEqual(mock_post.call_args.args[0], "https://api.openai.com/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")
        self.assertEqual(kwargs["json"]["max_tokens"], 800)
        self.assertEqual(kwargs["json"]["model"], "gpt-4o-mini")
        messages = kwargs["json"]["messages"]
        self.assertEqual([row["role"] for row in messages], ["system", "user"])
        self.assertIn('Tone="formal"', messages[1]["content"])
        self.assertIn("Preserve all facts and intent of the original.", messages[1]["content"])
        self.assertIn('"""Hello"""', messages[1]["content"])

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_surrounding_whitespace_is_trimmed(self, mock_post):
        mock_post.return_value = _response(
            200, body={"choices": [{"message": {"content": "\n  Dear team,\nThanks.  \n"}}]}
        )

        result = _relay().rewrite(RewriteRequest(original_text="thx team"))

        self.assertEqual(result.rewritten_text, "Dear team,\nThanks.")

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_provider_error_carries_status_and_body(self, mock_post):
        mock_post.return_value = _response(500, text="rate limited")

        result = _relay().rewrite(RewriteRequest(original_text="Hello"))

        self.assertIsInstance(result, RewriteFailure)
        self.assertEqual(result.kind, FailureKind.PROVIDER_ERROR)
        self.assertEqual(result.detail, "rate limited")
        self.assertEqual(result.status, 500)

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_blank_text_never_reaches_the_network(self, mock_post):
        for text in ("", "   ", "\n\t"):
            result = _relay().rewrite(RewriteRequest(original_text=text))
            self.assertEqual(result.kind, FailureKind.VALIDATION_ERROR)
        mock_post.assert_not_called()

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_missing_credential_fails_without_network_call(self, mock_post):
        result = _relay(api_key=None).rewrite(RewriteRequest(original_text="Hello"))

        self.assertEqual(result.kind, FailureKind.PROVIDER_ERROR)
        self.assertIn("credential", result.detail)
        mock_post.assert_not_called()

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_malformed_payloads_are_not_treated_as_rewrites(self, mock_post):
        payloads = [
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": "   "}}]},
            {"id": "cmpl-1"},
            ["not", "an", "object"],
            ValueError("not json"),
        ]
        for body in payloads:
            mock_post.return_value = _response(200, body=body)
            result = _relay().rewrite(RewriteRequest(original_text="Hello"))
            self.assertIsInstance(result, RewriteFailure, msg=repr(body))
            self.assertEqual(result.kind, FailureKind.MALFORMED_RESPONSE)

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_content_parts_are_joined(self, mock_post):
        mock_post.return_value = _response(
            200,
            body={
                "choices": [
                    {"message": {"content": [{"type": "text", "text": "Hello"}, {"text": "World"}]}}
                ]
            },
        )

        result = _relay().rewrite(RewriteRequest(original_text="hi"))

        self.assertEqual(result.rewritten_text, "Hello\nWorld")

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_transport_failures_are_returned(self, mock_post):
        for exc in (
            requests.Timeout("read timed out"),
            requests.ConnectionError("connection refused"),
        ):
            mock_post.side_effect = exc
            result = _relay().rewrite(RewriteRequest(original_text="Hello"))
            self.assertEqual(result.kind, FailureKind.TRANSPORT_ERROR)
            self.assertIn(str(exc), result.detail)

    @patch("stylerewriter.services.llm_client.requests.post")
    def test_rewritten_output_can_be_rewritten_again(self, mock_post):
        mock_post.side_effect = [
            _response(200, body={"choices": [{"message": {"content": "Hey! Quick note."}}]}),
            _response(200, body={"choices": [{"message": {"content": "Hey there! A quick note."}}]}),
        ]
        style = StyleProfile(tone="friendly")
        relay = _relay()

        first = relay.rewrite(RewriteRequest(original_text="Note.", style_profile=style))
        second = relay.rewrite(
            RewriteRequest(original_text=first.rewritten_text, style_profile=style)
        )

        self.assertIsInstance(first, RewriteSuccess)
        self.assertIsInstance(second, RewriteSuccess)
        sent = mock_post.call_args_list[1].kwargs["json"]["messages"][1]["content"]
        self.assertIn('"""Hey! Quick note."""', sent)


class OpenAICompatibleClientTests(unittest.TestCase):
    def test_rejects_unknown_provider(self):
        with self.assertRaises(ValueError):
            OpenAICompatibleClient(
                OpenAICompatibleConfig(provider="anthropic", model="m", api_key="k", timeout_seconds=5)
            )

    def test_groq_uses_its_default_base_url(self):
        client = OpenAICompatibleClient(
            OpenAICompatibleConfig(provider="groq", model="llama", api_key="k", timeout_seconds=5)
        )
        with patch("stylerewriter.services.llm_client.requests.post") as mock_post:
            mock_post.return_value = _response(
                200, body={"choices": [{"message": {"content": "ok"}}]}
            )
            client.complete(messages=[], temperature=0.0, max_tokens=10)
        self.assertEqual(
            mock_post.call_args.args[0], "https://api.groq.com/openai/v1/chat/completions"
        )


if __name__ == "__main__":
    unittest.main()
