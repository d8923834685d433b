"""Crafted provider response bodies and helpers for client tests.

Only the fields our parsing relies on are included, plus a few extra ones
real APIs send so we know unknown fields are ignored.
"""

from collections.abc import Callable
from typing import Any

import httpx

from gen_commit.ai.client import ProviderClient
from gen_commit.models import ClientConfig, Provider


def anthropic_success(
    text: str = "  hello  ", input_tokens: int = 12, output_tokens: int = 7
) -> dict[str, Any]:
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-sonnet-4-20250514",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


def openai_success(
    text: str = "  hello  ",
    input_tokens: int = 20,
    output_tokens: int = 8,
    total_tokens: int | None = None,
) -> dict[str, Any]:
    return {
        "id": "resp_01",
        "object": "response",
        "model": "gpt-4.1",
        "output": [
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            }
        ],
        "usage": {
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": (
                input_tokens + output_tokens if total_tokens is None else total_tokens
            ),
        },
    }


SUCCESS_BODIES: dict[Provider, Callable[..., dict[str, Any]]] = {
    Provider.ANTHROPIC: anthropic_success,
    Provider.OPENAI: openai_success,
}


def make_client(
    provider: Provider,
    handler: Callable[[httpx.Request], httpx.Response],
    model_name: str = "test-model",
    max_output_tokens: int = 500,
    temperature: float = 0.2,
) -> ProviderClient:
    """Build a ProviderClient whose HTTP traffic goes to ``handler``."""
    config = ClientConfig(
        model_name=model_name,
        max_output_tokens=max_output_tokens,
        temperature=temperature,
        credential="test-key",
    )
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ProviderClient(provider, config, http_client=http_client)


class RecordingHandler:
    """MockTransport handler that replays responses and records requests."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)
