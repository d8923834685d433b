"""Tests for the commit message generation pipeline."""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from gen_commit.ai.analysis import ANALYSIS_SYSTEM_PROMPT
from gen_commit.ai.client import ProviderClient
from gen_commit.ai.prompts import COMMIT_SYSTEM_PROMPT
from gen_commit.config import GenerationSettings
from gen_commit.errors import (
    GitCommandError,
    MissingCredentialError,
    NoChangesError,
    RequestFailedError,
)
from gen_commit.git import GitRepository
from gen_commit.models import GenerateResult, GenerationOutcome, Provider, UsageInfo
from gen_commit.orchestrator import (
    CommitMessageGenerator,
    is_affirmative,
    usage_breakdown,
)
from tests.fixtures.provider_responses import (
    RecordingHandler,
    anthropic_success,
    make_client,
    openai_success,
)

DIFF = "diff --git a/app.py b/app.py\n+def login(): ...\n"


def make_repository(diff: str = DIFF) -> Mock:
    repository = Mock(spec=GitRepository)
    repository.get_root = AsyncMock(return_value="/nonexistent/repo")
    repository.get_branch_name = AsyncMock(return_value="main")
    repository.get_staged_diff = AsyncMock(return_value=diff)
    repository.get_staged_files = AsyncMock(return_value=["app.py"])
    repository.get_recent_commits = AsyncMock(return_value=["chore: init"])
    repository.commit = AsyncMock()
    return repository


def make_llm_client(*results: GenerateResult) -> Mock:
    client = Mock(spec=ProviderClient)
    client.generate = AsyncMock(side_effect=list(results))
    client.close = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


class TestCommitMessageGenerator:
    """Test the CommitMessageGenerator orchestrator."""

    def setup_method(self):
        self.repository = make_repository()
        self.analysis = GenerateResult(
            message="- Added login()",
            usage=UsageInfo(input_tokens=10, output_tokens=5, total_tokens=15),
        )
        self.generation = GenerateResult(
            message="feat: add login",
            usage=UsageInfo(input_tokens=20, output_tokens=8, total_tokens=28),
        )
        self.client = make_llm_client(self.analysis, self.generation)
        self.builder = Mock(return_value=self.client)

    @pytest.mark.asyncio
    async def test_generate_with_analysis(self):
        """Test the full run: analysis, then generation, then usage totals."""
        settings = GenerationSettings(model="openai:gpt-4.1", max_tokens=321, temperature=0.5)
        generator = CommitMessageGenerator(self.repository, settings, self.builder)

        outcome = await generator.generate()

        assert outcome.message == "feat: add login"
        assert outcome.analysis_summary == "- Added login()"
        assert outcome.total_usage == UsageInfo(
            input_tokens=30, output_tokens=13, total_tokens=43
        )
        self.builder.assert_called_once_with("openai:gpt-4.1", 321, 0.5)

        analysis_call, generation_call = self.client.generate.await_args_list
        assert analysis_call.args[0] == ANALYSIS_SYSTEM_PROMPT
        assert DIFF in analysis_call.args[1]
        assert generation_call.args[0] == COMMIT_SYSTEM_PROMPT
        assert "Change analysis:\n- Added login()" in generation_call.args[1]
        self.client.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_generate_without_analysis(self):
        """Test that disabling analysis makes exactly one model call."""
        client = make_llm_client(self.generation)
        settings = GenerationSettings(analysis_enabled=False)
        generator = CommitMessageGenerator(self.repository, settings, Mock(return_value=client))

        outcome = await generator.generate()

        assert client.generate.await_count == 1
        assert outcome.analysis_usage is None
        assert outcome.total_usage == self.generation.usage
        assert "Change analysis:\n\n" in client.generate.await_args.args[1]

    @pytest.mark.asyncio
    async def test_empty_diff_aborts_before_client_build(self):
        """Test that nothing is built or sent when there are no staged changes."""
        generator = CommitMessageGenerator(
            make_repository(diff=""), GenerationSettings(), self.builder
        )

        with pytest.raises(NoChangesError):
            await generator.generate()

        self.builder.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_diff_skips_specifier_validation(self):
        """Test that an invalid model never matters when nothing is staged."""
        generator = CommitMessageGenerator(
            make_repository(diff=""), GenerationSettings(model="not-a-specifier")
        )

        with pytest.raises(NoChangesError):
            await generator.generate()

    @pytest.mark.asyncio
    async def test_client_build_failure_propagates(self):
        builder = Mock(side_effect=MissingCredentialError("ANTHROPIC_API_KEY"))
        generator = CommitMessageGenerator(self.repository, GenerationSettings(), builder)

        with pytest.raises(MissingCredentialError):
            await generator.generate()

    @pytest.mark.asyncio
    async def test_analysis_failure_aborts_run(self):
        """Test that a failed analysis call is not skipped over."""
        client = make_llm_client(RequestFailedError("overloaded", status_code=529))
        generator = CommitMessageGenerator(
            self.repository, GenerationSettings(), Mock(return_value=client)
        )

        with pytest.raises(RequestFailedError):
            await generator.generate()

        assert client.generate.await_count == 1
        client.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_git_failure_propagates(self):
        self.repository.get_root.side_effect = GitCommandError(
            "git rev-parse --show-toplevel"
        )
        generator = CommitMessageGenerator(self.repository, GenerationSettings(), self.builder)

        with pytest.raises(GitCommandError):
            await generator.generate()

        self.builder.assert_not_called()

    @pytest.mark.asyncio
    async def test_exclusions_reach_the_diff_query(self):
        settings = GenerationSettings(ignore="package-lock.json,dist/*")
        generator = CommitMessageGenerator(self.repository, settings, self.builder)

        await generator.collect_context()

        self.repository.get_staged_diff.assert_awaited_once_with(
            ["package-lock.json", "dist/*"]
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["y", "Y", " y \n"])
    async def test_confirm_yes_commits_with_editor(self, answer):
        generator = CommitMessageGenerator(self.repository)

        committed = await generator.confirm_and_commit("feat: add login", lambda: answer)

        assert committed is True
        self.repository.commit.assert_awaited_once_with("feat: add login", edit=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["", "n", "yes", "no"])
    async def test_confirm_anything_else_cancels(self, answer):
        generator = CommitMessageGenerator(self.repository)

        committed = await generator.confirm_and_commit("feat: add login", lambda: answer)

        assert committed is False
        self.repository.commit.assert_not_awaited()


class TestEndToEndWithTransport:
    """Run the pipeline against mocked HTTP endpoints."""

    @pytest.mark.asyncio
    async def test_anthropic_run(self):
        handler = RecordingHandler(
            httpx.Response(200, json=anthropic_success("- Added login()", 10, 5)),
            httpx.Response(200, json=anthropic_success("\nfeat: add login\n", 20, 8)),
        )
        client = make_client(Provider.ANTHROPIC, handler)
        generator = CommitMessageGenerator(
            make_repository(), GenerationSettings(), lambda *args: client
        )

        outcome = await generator.generate()

        assert outcome.message == "feat: add login"
        assert outcome.total_usage.total_tokens == 43
        assert len(handler.requests) == 2
        second_body = json.loads(handler.requests[1].content)
        assert "- Added login()" in second_body["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_openai_run_keeps_reported_totals(self):
        handler = RecordingHandler(
            httpx.Response(200, json=openai_success("summary", 10, 5, total_tokens=16)),
            httpx.Response(200, json=openai_success("fix: bug", 20, 8, total_tokens=30)),
        )
        client = make_client(Provider.OPENAI, handler)
        generator = CommitMessageGenerator(
            make_repository(), GenerationSettings(), lambda *args: client
        )

        outcome = await generator.generate()

        assert outcome.message == "fix: bug"
        assert outcome.total_usage == UsageInfo(
            input_tokens=30, output_tokens=13, total_tokens=46
        )


class TestHelpers:
    def test_usage_breakdown_with_analysis(self):
        outcome = GenerationOutcome(
            message="m",
            analysis_usage=UsageInfo(input_tokens=1, output_tokens=1),
            generation_usage=UsageInfo(input_tokens=2, output_tokens=2),
        )

        labels = [label for label, _ in usage_breakdown(outcome)]

        assert labels == ["Analysis", "Commit Message Generation", "Total"]

    def test_usage_breakdown_without_analysis(self):
        outcome = GenerationOutcome(
            message="m", generation_usage=UsageInfo(input_tokens=2, output_tokens=2)
        )

        labels = [label for label, _ in usage_breakdown(outcome)]

        assert labels == ["Commit Message Generation", "Total"]

    def test_settings_logged_at_debug(self, caplog):
        settings = GenerationSettings(model="openai:gpt-4.1", max_tokens=321)

        with caplog.at_level("DEBUG", logger="gen_commit.orchestrator"):
            CommitMessageGenerator(make_repository(), settings)

        assert "'model': 'openai:gpt-4.1'" in caplog.text
        assert "'max_tokens': 321" in caplog.text

    def test_is_affirmative(self):
        assert is_affirmative("y")
        assert not is_affirmative("yes")
