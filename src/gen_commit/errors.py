"""Exception hierarchy for gen-commit.

Every failure that aborts a run derives from ``PipelineError`` so the CLI can
report it uniformly. Lookups that are allowed to fail (scopes file, workspace
marker, recent commits) never raise these.
"""


class PipelineError(Exception):
    """Base exception for errors that abort commit message generation."""


# Git layer
class GitError(PipelineError):
    """Base exception for git-related failures."""


class GitCommandError(GitError):
    """Raised when a git command cannot be spawned or exits non-zero."""

    def __init__(self, command: str, stderr: str = "") -> None:
        super().__init__(f"Failed to execute {command}")
        self.command = command
        self.stderr = stderr


class NoStagedChangesError(GitError):
    """Raised when the staged diff query itself fails."""

    def __init__(self) -> None:
        super().__init__("No changes staged")


class NoChangesError(PipelineError):
    """Raised when the staged diff is empty and there is nothing to describe."""

    def __init__(self) -> None:
        super().__init__("no changes detected")


# Client construction
class ClientBuildError(PipelineError):
    """Base exception for failures while building a provider client."""


class SpecifierParseError(ClientBuildError):
    """Raised when a ``provider:model`` specifier cannot be parsed."""

    def __init__(self, specifier: str) -> None:
        super().__init__(
            f"Invalid model format: '{specifier}'. "
            "Expected '<provider>:<model>' with provider 'anthropic' or 'openai'"
        )
        self.specifier = specifier


class MissingCredentialError(ClientBuildError):
    """Raised when the provider's API key environment variable is not set."""

    def __init__(self, variable_name: str) -> None:
        super().__init__(f"{variable_name} environment variable not found")
        self.variable_name = variable_name


# Provider calls
class ClientError(PipelineError):
    """Base exception for provider request failures."""


class FailedToSendError(ClientError):
    """Raised when the request never reached the API (DNS, TLS, connection)."""

    def __init__(self, reason: str = "") -> None:
        message = "Failed to send request to API"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RequestFailedError(ClientError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, body: str, status_code: int | None = None) -> None:
        super().__init__(f"API request failed: {body}")
        self.body = body
        self.status_code = status_code


class ResponseParseError(ClientError):
    """Raised when a 2xx response does not match the vendor schema."""

    def __init__(self) -> None:
        super().__init__("Failed to parse API response")


class ConfigurationError(PipelineError):
    """Raised when settings or the settings file are invalid."""
