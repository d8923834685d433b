"""Provider client for gen-commit.

A single client class covers both supported backends. The ``Provider`` tag
chosen at construction decides which wire format is used; there is no
subclass per vendor.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from gen_commit.ai import anthropic, openai
from gen_commit.errors import FailedToSendError, RequestFailedError, ResponseParseError
from gen_commit.models import ClientConfig, GenerateResult, Provider

logger = logging.getLogger(__name__)


class ProviderClient:
    """Sends one (system prompt, user prompt) pair to a text-generation API.

    Each ``generate`` call issues exactly one HTTPS request. There are no
    retries and no client-side timeout.
    """

    def __init__(
        self,
        provider: Provider,
        config: ClientConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider client.

        Args:
            provider: Which backend to talk to
            config: Model name, token limit, temperature and credential
            http_client: Shared HTTP client (one is created lazily if None)
        """
        self.provider = provider
        self.config = config
        self._http_client = http_client
        self._owns_http_client = http_client is None

    @property
    def model(self) -> str:
        return self.config.model_name

    @property
    def name(self) -> str:
        return f"{self.provider.value}:{self.config.model_name}"

    def configure(
        self,
        model_name: str,
        max_output_tokens: int,
        temperature: float,
    ) -> "ProviderClient":
        """Return a client for the same backend with new generation settings.

        The credential is carried over, and so is an HTTP client this instance
        was given. A lazily created HTTP client stays with this instance, so the
        new client creates its own. Nothing is sent.
        """
        config = self.config.model_copy(
            update={
                "model_name": model_name,
                "max_output_tokens": max_output_tokens,
                "temperature": temperature,
            }
        )
        http_client = None if self._owns_http_client else self._http_client
        return ProviderClient(self.provider, config, http_client=http_client)

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=None)
            self._owns_http_client = True
        return self._http_client

    def _build_call(
        self, system_prompt: str, user_prompt: str
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return ``(url, headers, body)`` for the configured backend."""
        if self.provider is Provider.ANTHROPIC:
            return (
                anthropic.MESSAGES_URL,
                anthropic.build_headers(self.config.credential),
                anthropic.build_request(self.config, system_prompt, user_prompt),
            )
        if self.provider is Provider.OPENAI:
            return (
                openai.RESPONSES_URL,
                openai.build_headers(self.config.credential),
                openai.build_request(self.config, system_prompt, user_prompt),
            )
        raise ValueError(f"Unsupported provider: {self.provider}")

    def _parse(self, payload: Any) -> GenerateResult:
        if self.provider is Provider.ANTHROPIC:
            return anthropic.parse_response(payload)
        if self.provider is Provider.OPENAI:
            return openai.parse_response(payload)
        raise ValueError(f"Unsupported provider: {self.provider}")

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerateResult:
        """Generate text for the given prompts.

        Args:
            system_prompt: System instruction for the model
            user_prompt: User content

        Returns:
            The first text block (trimmed) and normalized token usage

        Raises:
            FailedToSendError: If the request could not be sent
            RequestFailedError: If the API returned a non-2xx status
            ResponseParseError: If a 2xx body does not match the vendor schema
        """
        url, headers, body = self._build_call(system_prompt, user_prompt)
        logger.debug(
            f"POST {url} (model={self.config.model_name}, "
            f"max_tokens={self.config.max_output_tokens}, "
            f"prompt chars={len(system_prompt) + len(user_prompt)})"
        )

        try:
            response = await self._get_http_client().post(url, headers=headers, json=body)
        except httpx.RequestError as e:
            logger.error(f"Request to {self.name} failed: {e}")
            raise FailedToSendError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error(f"{self.name} returned HTTP {response.status_code}")
            raise RequestFailedError(response.text, status_code=response.status_code)

        try:
            result = self._parse(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Unexpected response body from {self.name}: {e}")
            raise ResponseParseError() from e

        logger.info(
            f"Generated {len(result.message)} chars with {self.name} "
            f"({result.usage.total_tokens} tokens)"
        )
        return result

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "ProviderClient":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit with cleanup."""
        await self.close()
