"""AI integration module for gen-commit.

This module talks to the Anthropic Messages API and the OpenAI Responses API
over plain HTTPS, behind a single ``ProviderClient`` selected from a
``provider:model`` specifier.
"""

from .analysis import analyze_changes
from .client import ProviderClient
from .factory import build_client, create_client, parse_model_spec, resolve_credential
from .prompts import COMMIT_SYSTEM_PROMPT, build_commit_user_prompt

__all__ = [
    "ProviderClient",
    "build_client",
    "create_client",
    "parse_model_spec",
    "resolve_credential",
    "analyze_changes",
    "COMMIT_SYSTEM_PROMPT",
    "build_commit_user_prompt",
]
