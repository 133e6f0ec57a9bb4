"""
Unit tests for the LLM provider clients.

Contract:
- A missing key is reported as LLMAuthError at call time, never at construction
- SDK auth errors become LLMAuthError, other SDK errors become LLMError
"""

import unittest
from unittest import mock

import anthropic
import httpx
import openai

import support  # noqa: F401
from brain.llm import (
    AnthropicClient,
    GeminiClient,
    LLMAuthError,
    LLMError,
    OpenAIClient,
    build_completion_client,
)
from server import config


def api_response(status_code: int, url: str) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", url))


class TestBuildCompletionClient(unittest.TestCase):
    def test_providers(self) -> None:
        with mock.patch.object(config, "OPENAI_API_KEY", "sk-test"), \
                mock.patch.object(config, "OPENAI_MODEL", "gpt-test"):
            client = build_completion_client("OpenAI")
        self.assertIsInstance(client, OpenAIClient)
        self.assertEqual(client.api_key, "sk-test")
        self.assertEqual(client.model_name, "gpt-test")
        self.assertIsInstance(build_completion_client("gemini"), GeminiClient)
        self.assertIsInstance(build_completion_client("anthropic"), AnthropicClient)

    def test_unknown_provider(self) -> None:
        with self.assertRaises(ValueError):
            build_completion_client("llama")


class TestMissingKeys(unittest.TestCase):
    def test_each_client_raises_auth_error(self) -> None:
        for client in (GeminiClient("", "gemini-test"), OpenAIClient("", "gpt-test"),
                       AnthropicClient("", "claude-test")):
            with self.assertRaises(LLMAuthError):
                client.complete("hello")


class TestOpenAIClient(unittest.TestCase):
    def setUp(self) -> None:
        self.client = OpenAIClient("sk-test", "gpt-test")
        self.sdk = mock.Mock()
        self.client._client = self.sdk

    def test_complete_returns_message_text(self) -> None:
        completion = mock.Mock()
        completion.choices = [mock.Mock(message=mock.Mock(content="  Final exam in December \n"))]
        self.sdk.chat.completions.create.return_value = completion

        self.assertEqual(self.client.complete("When?", system="Be brief"), "Final exam in December")
        kwargs = self.sdk.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-test")
        self.assertEqual(kwargs["messages"][0], {"role": "system", "content": "Be brief"})
        self.assertEqual(kwargs["messages"][1], {"role": "user", "content": "When?"})

    def test_complete_json_uses_schema_mode(self) -> None:
        completion = mock.Mock()
        completion.choices = [mock.Mock(message=mock.Mock(content='{"deadlines": []}'))]
        self.sdk.chat.completions.create.return_value = completion

        self.client.complete_json("extract", {"type": "object"}, "deadlines")
        response_format = self.sdk.chat.completions.create.call_args.kwargs["response_format"]
        self.assertEqual(response_format["type"], "json_schema")
        self.assertEqual(response_format["json_schema"]["name"], "deadlines")

    def test_authentication_error_is_translated(self) -> None:
        self.sdk.chat.completions.create.side_effect = openai.AuthenticationError(
            "Incorrect API key provided", response=api_response(401, "https://api.openai.com/v1"), body=None
        )
        with self.assertRaises(LLMAuthError):
            self.client.complete("hello")

    def test_other_errors_are_generic(self) -> None:
        self.sdk.chat.completions.create.side_effect = openai.RateLimitError(
            "Rate limit reached", response=api_response(429, "https://api.openai.com/v1"), body=None
        )
        with self.assertRaises(LLMError) as ctx:
            self.client.complete("hello")
        self.assertNotIsInstance(ctx.exception, LLMAuthError)


class TestAnthropicClient(unittest.TestCase):
    def test_authentication_error_is_translated(self) -> None:
        client = AnthropicClient("sk-ant-test", "claude-test")
        client._client = mock.Mock()
        client._client.messages.create.side_effect = anthropic.AuthenticationError(
            "invalid x-api-key", response=api_response(401, "https://api.anthropic.com/v1"), body=None
        )
        with self.assertRaises(LLMAuthError):
            client.complete("hello")


class TestGeminiClient(unittest.TestCase):
    def test_schema_is_described_in_prompt(self) -> None:
        client = GeminiClient("key", "gemini-test")
        model = mock.Mock()
        model.generate_content.return_value = mock.Mock(text='{"topic": "loops"}')
        client._model = model

        self.assertEqual(client.complete_json("Explain", {"type": "object"}, "question"), '{"topic": "loops"}')
        prompt = model.generate_content.call_args.args[0]
        self.assertIn("Explain", prompt)
        self.assertIn("JSON schema", prompt)


if __name__ == "__main__":
    unittest.main()
