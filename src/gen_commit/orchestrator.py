"""Commit message generation pipeline.

This module sequences context collection, the optional analysis call, prompt
assembly, the generation call, usage accounting and the final commit. Each
step runs after the previous one finished and the first failure ends the run.
"""

import logging
from collections.abc import Callable

from gen_commit.ai.analysis import analyze_changes
from gen_commit.ai.client import ProviderClient
from gen_commit.ai.factory import build_client
from gen_commit.ai.prompts import COMMIT_SYSTEM_PROMPT, build_commit_user_prompt
from gen_commit.config import GenerationSettings
from gen_commit.context import ContextCollector
from gen_commit.errors import NoChangesError
from gen_commit.git import GitRepository
from gen_commit.models import AppContext, GenerationOutcome, UsageInfo

logger = logging.getLogger(__name__)

ClientBuilder = Callable[[str, int, float], ProviderClient]

ANALYSIS_LABEL = "Analysis"
GENERATION_LABEL = "Commit Message Generation"
TOTAL_LABEL = "Total"


def usage_breakdown(outcome: GenerationOutcome) -> list[tuple[str, UsageInfo]]:
    """Per-call usage rows followed by the aggregate row."""
    rows = []
    if outcome.analysis_usage is not None:
        rows.append((ANALYSIS_LABEL, outcome.analysis_usage))
    rows.append((GENERATION_LABEL, outcome.generation_usage))
    rows.append((TOTAL_LABEL, outcome.total_usage))
    return rows


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower() == "y"


class CommitMessageGenerator:
    """Orchestrates the complete commit message generation pipeline."""

    def __init__(
        self,
        repository: GitRepository,
        settings: GenerationSettings | None = None,
        client_builder: ClientBuilder | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            repository: Git wrapper for the working tree
            settings: Run options (defaults if None)
            client_builder: Callable ``(specifier, max_tokens, temperature)``
                returning a client (the factory's ``build_client`` if None)
        """
        self.repository = repository
        self.settings = settings or GenerationSettings()
        self.client_builder = client_builder or build_client
        self.collector = ContextCollector(
            repository,
            scopes_file=self.settings.scopes_file,
            workspace_marker=self.settings.workspace_marker,
            recent_commit_count=self.settings.recent_commit_count,
        )
        logger.debug(f"Settings: {self.settings.to_dict()}")

    async def collect_context(self) -> AppContext:
        """Collect repository context.

        Raises:
            NoChangesError: If the staged diff is empty
            GitError: If a required git lookup fails
        """
        context = await self.collector.collect(self.settings.ignore)
        if not context.diff_text:
            logger.info("Staged diff is empty, nothing to describe")
            raise NoChangesError()
        return context

    def build_client(self) -> ProviderClient:
        logger.info("Creating AI client")
        client = self.client_builder(
            self.settings.model, self.settings.max_tokens, self.settings.temperature
        )
        logger.debug(f"Model: {self.settings.model}")
        return client

    async def analyze(
        self, client: ProviderClient, context: AppContext
    ) -> tuple[str, UsageInfo | None]:
        """Run the analysis call unless it is disabled."""
        if not self.settings.analysis_enabled:
            logger.info("Skipping AI analysis (--no-analysis flag enabled)")
            return "", None

        logger.info("Analyzing changes with AI")
        result = await analyze_changes(client, context.diff_text)
        usage = result.usage
        logger.debug(
            f"Analysis usage - Input: {usage.input_tokens}, "
            f"Output: {usage.output_tokens}, Total: {usage.total_tokens}"
        )
        return result.message, usage

    async def generate_with_client(
        self, client: ProviderClient, context: AppContext
    ) -> GenerationOutcome:
        """Run analysis, prompt assembly and generation with ``client``."""
        analysis_summary, analysis_usage = await self.analyze(client, context)

        logger.info("Building user prompt")
        user_prompt = build_commit_user_prompt(context, analysis_summary)
        logger.debug(f"User prompt length: {len(user_prompt)} characters")

        logger.info("Generating commit message")
        result = await client.generate(COMMIT_SYSTEM_PROMPT, user_prompt)

        return GenerationOutcome(
            message=result.message,
            analysis_summary=analysis_summary,
            analysis_usage=analysis_usage,
            generation_usage=result.usage,
        )

    async def generate(self) -> GenerationOutcome:
        """Generate a commit message for the staged changes.

        Returns:
            The message with per-call token usage

        Raises:
            NoChangesError: If nothing is staged (no client is built)
            PipelineError: If any git lookup, client build or model call fails
        """
        context = await self.collect_context()
        client = self.build_client()

        async with client:
            outcome = await self.generate_with_client(client, context)

        for label, usage in usage_breakdown(outcome):
            logger.debug(
                f"{label}: input={usage.input_tokens} output={usage.output_tokens} "
                f"total={usage.total_tokens}"
            )
        return outcome

    async def confirm_and_commit(self, message: str, ask: Callable[[], str]) -> bool:
        """Commit with ``message`` if the user answers yes.

        Args:
            message: Commit message to use
            ask: Reads one line of confirmation from the user

        Returns:
            True if a commit was made, False if the user declined
        """
        if not is_affirmative(ask()):
            logger.info("Commit cancelled by user")
            return False

        await self.repository.commit(message, edit=True)
        logger.info("Commit successful")
        return True
