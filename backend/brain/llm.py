"""LLM completion clients — Gemini, OpenAI and Claude behind one `complete()` call.

Every client takes its API key and model at construction and translates the
SDK's exceptions into `LLMAuthError` (missing / rejected credential) or
`LLMError` (anything else: quota, network, malformed request). Callers never
see SDK exception types.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

import anthropic
import google.generativeai as genai
import openai
from google.api_core import exceptions as google_exceptions

from server import config

logger = logging.getLogger(__name__)

TEMPERATURE = 0.2  # low temperature for more deterministic extraction


class LLMError(Exception):
    """A completion request failed."""


class LLMAuthError(LLMError):
    """The provider rejected (or was never given) an API key."""


class CompletionClient:
    """Interface: send a prompt, get the raw completion text back."""

    name = "base"
    supports_json_schema = False

    def complete(self, prompt: str, system: Optional[str] = None) -> str:
        raise NotImplementedError

    def json_prompt(self, prompt: str, schema: dict) -> str:
        """The prompt text `complete_json` actually sends."""
        if self.supports_json_schema:
            return prompt
        return f"{prompt}\n\n{describe_schema(schema)}"

    def complete_json(self, prompt: str, schema: dict, schema_name: str,
                      system: Optional[str] = None) -> str:
        """Schema-guided completion. Providers without a native mode get the schema in the prompt."""
        return self.complete(self.json_prompt(prompt, schema), system=system)


class GeminiClient(CompletionClient):
    name = "gemini"

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model_name = model
        self._model = None

    def _get_model(self):
        if not self.api_key:
            raise LLMAuthError("Gemini API key not configured (GEMINI_API_KEY)")
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(
                self.model_name,
                generation_config={"temperature": TEMPERATURE, "top_k": 32, "top_p": 0.95},
            )
        return self._model

    def complete(self, prompt: str, system: Optional[str] = None) -> str:
        model = self._get_model()
        if system:
            prompt = f"{system}\n\n{prompt}"
        try:
            response = model.generate_content(prompt)
            return response.text or ""
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as e:
            raise LLMAuthError(f"Gemini rejected the API key: {e}") from e
        except google_exceptions.InvalidArgument as e:
            # Gemini reports a malformed key as 400 INVALID_ARGUMENT
            if "API_KEY_INVALID" in str(e) or "API key not valid" in str(e):
                raise LLMAuthError(f"Gemini rejected the API key: {e}") from e
            raise LLMError(f"Gemini request failed: {e}") from e
        except google_exceptions.GoogleAPIError as e:
            raise LLMError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            # response.text raises ValueError when the candidate was blocked
            raise LLMError(f"Gemini returned no usable text: {e}") from e


class OpenAIClient(CompletionClient):
    name = "openai"
    supports_json_schema = True

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model_name = model
        self._client = None

    def _get_client(self):
        if not self.api_key:
            raise LLMAuthError("OpenAI API key is not configured (OPENAI_API_KEY)")
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def _create(self, messages: list[dict], **kwargs) -> str:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=TEMPERATURE,
                **kwargs,
            )
            return (response.choices[0].message.content or "").strip()
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise LLMAuthError(f"OpenAI rejected the API key: {e}") from e
        except openai.OpenAIError as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

    @staticmethod
    def _messages(prompt: str, system: Optional[str]) -> list[dict]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    def complete(self, prompt: str, system: Optional[str] = None) -> str:
        return self._create(self._messages(prompt, system))

    def complete_json(self, prompt: str, schema: dict, schema_name: str,
                      system: Optional[str] = None) -> str:
        return self._create(
            self._messages(prompt, system),
            response_format={
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema, "strict": True},
            },
        )


class AnthropicClient(CompletionClient):
    name = "anthropic"

    def __init__(self, api_key: str, model: str, max_tokens: int = 4000):
        self.api_key = api_key
        self.model_name = model
        self.max_tokens = max_tokens
        self._client = None

    def _get_client(self):
        if not self.api_key:
            raise LLMAuthError("Anthropic API key not configured (ANTHROPIC_API_KEY)")
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def complete(self, prompt: str, system: Optional[str] = None) -> str:
        client = self._get_client()
        kwargs = {"system": system} if system else {}
        try:
            message = client.messages.create(
                model=self.model_name,
                max_tokens=self.max_tokens,
                temperature=TEMPERATURE,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
            return message.content[0].text.strip()
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise LLMAuthError(f"Anthropic rejected the API key: {e}") from e
        except anthropic.AnthropicError as e:
            raise LLMError(f"Anthropic request failed: {e}") from e


def build_completion_client(provider: str) -> CompletionClient:
    """Build a client for `provider` with the key and model from config."""
    provider = (provider or "").lower()
    if provider == "gemini":
        return GeminiClient(config.GEMINI_API_KEY, config.GEMINI_MODEL)
    if provider == "openai":
        return OpenAIClient(config.OPENAI_API_KEY, config.OPENAI_MODEL)
    if provider == "anthropic":
        return AnthropicClient(config.ANTHROPIC_API_KEY, config.ANTHROPIC_MODEL)
    raise ValueError(f"Unknown LLM provider: {provider!r} (expected gemini, openai or anthropic)")


def describe_schema(schema: dict) -> str:
    """Render a JSON schema as prompt text for providers without a native schema mode."""
    return (
        "Respond with a JSON object that conforms to this JSON schema. "
        "Return ONLY the JSON, no markdown fences.\n"
        f"{json.dumps(schema, indent=2)}"
    )
