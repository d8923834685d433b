"""Anthropic Messages API wire format."""

from typing import Any

from pydantic import BaseModel

from gen_commit.models import ClientConfig, GenerateResult, UsageInfo

MESSAGES_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class ContentBlock(BaseModel):
    """A single content block of a Messages API response."""

    text: str


class AnthropicUsage(BaseModel):
    input_tokens: int
    output_tokens: int


class AnthropicResponse(BaseModel):
    """Fields of a Messages API response that we rely on."""

    content: list[ContentBlock]
    usage: AnthropicUsage


def build_headers(credential: str) -> dict[str, str]:
    return {
        "x-api-key": credential,
        "anthropic-version": API_VERSION,
        "content-type": "application/json",
    }


def build_request(
    config: ClientConfig, system_prompt: str, user_prompt: str
) -> dict[str, Any]:
    """Build a Messages API body.

    The system prompt goes in the top-level ``system`` list; the user prompt is
    the only turn in ``messages``.
    """
    return {
        "model": config.model_name,
        "max_tokens": config.max_output_tokens,
        "messages": [{"role": "user", "content": user_prompt}],
        "stream": False,
        "temperature": config.temperature,
        "system": [{"type": "text", "text": system_prompt}],
    }


def parse_response(payload: Any) -> GenerateResult:
    """Convert a decoded response body into a ``GenerateResult``.

    Raises:
        pydantic.ValidationError: If the body does not match the schema
    """
    response = AnthropicResponse.model_validate(payload)
    message = response.content[0].text.strip() if response.content else ""
    usage = UsageInfo(
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
    )
    return GenerateResult(message=message, usage=usage)
