"""Build provider clients from ``provider:model`` specifiers."""

import logging
import os
from collections.abc import Mapping

import httpx

from gen_commit.ai.client import ProviderClient
from gen_commit.errors import MissingCredentialError, SpecifierParseError
from gen_commit.models import ClientConfig, ModelSpec, Provider

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.2

CREDENTIAL_ENV_VARS = {
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.OPENAI: "OPENAI_API_KEY",
}


def parse_model_spec(specifier: str) -> ModelSpec:
    """Parse ``"<provider>:<model>"`` into a ``ModelSpec``.

    Exactly one colon is allowed, both parts must be non-empty and the
    provider tag must match a known provider exactly.

    Raises:
        SpecifierParseError: If the specifier is malformed or the provider unknown
    """
    parts = specifier.split(":")
    if len(parts) != 2 or not all(parts):
        raise SpecifierParseError(specifier)

    provider_tag, model_name = parts
    try:
        provider = Provider(provider_tag)
    except ValueError as e:
        raise SpecifierParseError(specifier) from e

    return ModelSpec(provider=provider, model_name=model_name)


def credential_env_var(provider: Provider) -> str:
    return CREDENTIAL_ENV_VARS[provider]


def resolve_credential(
    provider: Provider, environ: Mapping[str, str] | None = None
) -> str:
    """Look up the API key for ``provider``.

    Args:
        provider: Provider whose key is needed
        environ: Mapping to read from (defaults to ``os.environ``)

    Raises:
        MissingCredentialError: If the variable is unset or empty
    """
    env = os.environ if environ is None else environ
    variable_name = credential_env_var(provider)
    credential = env.get(variable_name)
    if not credential:
        raise MissingCredentialError(variable_name)
    return credential


def create_client(
    spec: ModelSpec,
    credential: str,
    max_output_tokens: int,
    temperature: float = DEFAULT_TEMPERATURE,
    http_client: httpx.AsyncClient | None = None,
) -> ProviderClient:
    """Create a configured client. Performs no network activity."""
    config = ClientConfig(
        model_name=spec.model_name,
        max_output_tokens=max_output_tokens,
        temperature=temperature,
        credential=credential,
    )
    return ProviderClient(spec.provider, config, http_client=http_client)


def build_client(
    specifier: str,
    max_output_tokens: int,
    temperature: float = DEFAULT_TEMPERATURE,
    environ: Mapping[str, str] | None = None,
) -> ProviderClient:
    """Parse ``specifier``, resolve its credential and create the client.

    Raises:
        SpecifierParseError: If the specifier is invalid
        MissingCredentialError: If the provider's API key is not set
    """
    spec = parse_model_spec(specifier)
    credential = resolve_credential(spec.provider, environ)
    client = create_client(spec, credential, max_output_tokens, temperature)
    logger.info(f"Created client for {spec} (max_tokens={max_output_tokens})")
    return client
