"""Optional diff analysis call made before commit message generation."""

import logging

from gen_commit.ai.client import ProviderClient
from gen_commit.models import GenerateResult

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert code analyst. Analyze git diffs and provide concise "
    "summaries of changes. Focus on identifying new functions, modified functions, "
    "tests, dependencies, and overall purpose. Format responses as bullet points. "
    "Be brief and specific."
)

ANALYSIS_CATEGORIES = [
    "New functions/methods added",
    "Functions/methods modified",
    "Tests added or modified",
    "Dependencies changed",
    "Overall purpose of the changes",
]


def build_analysis_user_prompt(diff: str) -> str:
    """Embed the raw diff in the categorized-summary request."""
    categories = "\n".join(
        f"{index}. {category}" for index, category in enumerate(ANALYSIS_CATEGORIES, 1)
    )
    return (
        "Analyze the following git diff and provide a concise summary of the changes.\n"
        f"Focus on identifying:\n{categories}\n\n"
        "Format your response as bullet points, one for each category. "
        "Be brief and specific.\n\n"
        f"Git diff:\n{diff}\n"
    )


async def analyze_changes(client: ProviderClient, diff: str) -> GenerateResult:
    """Summarize ``diff`` with one model call.

    Failures propagate; the analysis is not best-effort.
    """
    result = await client.generate(ANALYSIS_SYSTEM_PROMPT, build_analysis_user_prompt(diff))
    logger.debug(f"Change analysis ({len(result.message)} chars):\n{result.message}")
    return result
