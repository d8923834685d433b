"""gen-commit - AI-generated conventional commit messages for staged changes.

Library API:

    from gen_commit import CommitMessageGenerator, GitRepository

    generator = CommitMessageGenerator(GitRepository("."))
    outcome = await generator.generate()
    print(outcome.message, outcome.total_usage)

    # Talk to a provider directly
    from gen_commit import build_client

    async with build_client("openai:gpt-4.1", max_output_tokens=500) as client:
        result = await client.generate("system prompt", "user prompt")
"""

__version__ = "0.1.0"

from gen_commit.ai.client import ProviderClient
from gen_commit.ai.factory import build_client, create_client, parse_model_spec
from gen_commit.config import GenerationSettings
from gen_commit.errors import (
    ClientBuildError,
    ClientError,
    ConfigurationError,
    FailedToSendError,
    GitCommandError,
    GitError,
    MissingCredentialError,
    NoChangesError,
    NoStagedChangesError,
    PipelineError,
    RequestFailedError,
    ResponseParseError,
    SpecifierParseError,
)
from gen_commit.git import GitRepository
from gen_commit.models import (
    AppContext,
    ClientConfig,
    GenerateResult,
    GenerationOutcome,
    ModelSpec,
    Provider,
    UsageInfo,
)
from gen_commit.orchestrator import CommitMessageGenerator

__all__ = [
    # Core API
    "CommitMessageGenerator",
    "GitRepository",
    "GenerationSettings",
    "ProviderClient",
    "build_client",
    "create_client",
    "parse_model_spec",
    # Models
    "AppContext",
    "ClientConfig",
    "GenerateResult",
    "GenerationOutcome",
    "ModelSpec",
    "Provider",
    "UsageInfo",
    # Exceptions
    "PipelineError",
    "GitError",
    "GitCommandError",
    "NoStagedChangesError",
    "NoChangesError",
    "ClientBuildError",
    "SpecifierParseError",
    "MissingCredentialError",
    "ClientError",
    "FailedToSendError",
    "RequestFailedError",
    "ResponseParseError",
    "ConfigurationError",
    # Metadata
    "__version__",
]
