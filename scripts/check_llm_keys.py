"""Ping every configured AI provider with a tiny prompt and report which keys work.

Run from the project root:  python scripts/check_llm_keys.py
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend"))

from brain.llm import LLMAuthError, LLMError, build_completion_client  # noqa: E402
from server import config  # noqa: E402


def check_providers():
    for provider in ("gemini", "openai", "anthropic"):
        print(f"Testing provider: {provider}...")
        client = build_completion_client(provider)
        try:
            reply = client.complete("Hello, are you there? Answer in one word.")
            print(f"  SUCCESS: {provider} ({client.model_name}) replied {reply[:40]!r}")
        except LLMAuthError as e:
            print(f"  FAILED (credentials): {provider}")
            print(f"  Error details: {e}")
        except LLMError as e:
            print(f"  FAILED (request): {provider}")
            print(f"  Error details: {e}")

    print(f"\nAnalyzer provider: {config.ANALYZER_PROVIDER}, assistant provider: {config.ASSISTANT_PROVIDER}")


if __name__ == "__main__":
    check_providers()
