"""OpenAI Responses API wire format."""

import logging
from typing import Any

from pydantic import BaseModel

from gen_commit.models import ClientConfig, GenerateResult, UsageInfo

logger = logging.getLogger(__name__)

RESPONSES_URL = "https://api.openai.com/v1/responses"


class OutputText(BaseModel):
    text: str


class OutputItem(BaseModel):
    """One element of the ``output`` array, holding nested text blocks."""

    content: list[OutputText]


class OpenAIUsage(BaseModel):
    input_tokens: int
    output_tokens: int
    total_tokens: int


class OpenAIResponse(BaseModel):
    """Fields of a Responses API response that we rely on."""

    output: list[OutputItem]
    usage: OpenAIUsage


def build_headers(credential: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {credential}",
        "Content-Type": "application/json",
    }


def build_request(
    config: ClientConfig, system_prompt: str, user_prompt: str
) -> dict[str, Any]:
    """Build a Responses API body with role-tagged system and user turns."""
    return {
        "model": config.model_name,
        "input": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "max_tokens": config.max_output_tokens,
        "temperature": config.temperature,
        "stream": False,
    }


def parse_response(payload: Any) -> GenerateResult:
    """Convert a decoded response body into a ``GenerateResult``.

    The vendor-reported ``total_tokens`` is kept as is.

    Raises:
        pydantic.ValidationError: If the body does not match the schema
    """
    response = OpenAIResponse.model_validate(payload)

    message = ""
    if response.output and response.output[0].content:
        message = response.output[0].content[0].text.strip()

    usage = UsageInfo(
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
        total_tokens=response.usage.total_tokens,
    )
    if not usage.is_consistent:
        logger.debug(
            f"Reported total_tokens {usage.total_tokens} differs from "
            f"input + output ({usage.input_tokens + usage.output_tokens})"
        )
    return GenerateResult(message=message, usage=usage)
