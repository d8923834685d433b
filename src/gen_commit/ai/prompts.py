"""Prompt text and prompt assembly for commit message generation."""

from collections.abc import Iterable

from gen_commit.models import AppContext

COMMIT_SYSTEM_PROMPT = (
    "You are an expert at generating git commit messages following conventional "
    "commit standards. Your response should only contain the commit message, "
    "nothing else."
)

# Checked in order; the first group with a matching substring wins.
FILE_GROUPS: list[tuple[str, tuple[str, ...]]] = [
    ("Frontend", (".tsx", ".jsx", ".css", ".scss", ".html", ".vue")),
    ("Backend", (".rs", ".go", ".js", ".py", ".rb", ".php", ".java")),
    ("Tests", ("test.", "spec.", "/tests/", "/test/")),
    ("Config", (".toml", ".json", ".yaml", ".yml", ".config.")),
    ("Docs", (".md", ".txt", "README", "LICENSE", "CHANGELOG")),
]
OTHER_GROUP = "Other"

COMMIT_GUIDELINES = """# Git Commit Message Generation

Write a clear, concise and meaningful git commit message for the staged changes
described below.

## Format
Follow the conventional commit pattern: `<type>[optional scope]: <description>`

## Types
- feat: A new feature
- fix: A bug fix
- docs: Documentation only changes
- style: Formatting changes that do not affect the meaning of the code
- refactor: A code change that neither fixes a bug nor adds a feature
- perf: A code change that improves performance
- test: Adding missing tests or correcting existing tests
- chore: Changes to the build process or auxiliary tools and libraries
- ci: Changes to CI configuration files and scripts
- build: Changes that affect the build system or external dependencies

## Subject line
- At most 72 characters
- Imperative mood ("Add feature", not "Added feature")
- No trailing period

## Scopes
- If a comma-separated list of scopes is provided, use ONLY scopes from that list
- In a workspace (monorepo) repository the scopes are app and lib names; prefer
  the one containing the changed files
- Omit the scope when none of the provided scopes clearly fits
- With no scopes and no workspace, a scope may be derived from directory names
  in the diff

## Body and footer
- When several changes are present, describe the primary one in the subject and
  list the others as `-` bullets in the body
- Put `BREAKING CHANGE: <details>` in the footer when backward compatibility breaks
- Reference issues with `Closes #123`, `Fixes #456` or `Resolves #789`
"""

CONTEXT_TEMPLATE = """Analyze the branch name, diff and scopes below to generate a conventional commit message.

```md
Branch name: {branch_name}
Scopes: {scopes}
Is Nx Repository: {is_workspace_repo}

Diff of staged changes:
{diff}

Modified files:
{modified_files}

Recent commits:
{recent_commits}

Change analysis:
{analysis}
```

ALWAYS RETURN ONLY THE COMMIT MESSAGE AS STANDARD OUTPUT. NO EXPLANATION, NO
INTRODUCTION, NO SUMMARY. JUST THE COMMIT MESSAGE:

<message-here>
"""


def group_files_by_type(modified_files: Iterable[str]) -> str:
    """Group file paths by rough category, one ``- Group: a, b`` line each.

    Groups appear in the order their first file was seen.
    """
    groups: dict[str, list[str]] = {}
    for path in modified_files:
        group = OTHER_GROUP
        for name, markers in FILE_GROUPS:
            if any(marker in path for marker in markers):
                group = name
                break
        groups.setdefault(group, []).append(path)

    return "".join(f"- {group}: {', '.join(files)}\n" for group, files in groups.items())


def format_recent_commits(commits: Iterable[str]) -> str:
    lines = [f"- {subject}\n" for subject in commits]
    if not lines:
        return "No recent commits found."
    return "".join(lines)


def build_commit_user_prompt(context: AppContext, analysis_summary: str = "") -> str:
    """Assemble the user prompt for the final generation call.

    Args:
        context: Repository context collected for this run
        analysis_summary: Output of the analysis call, or "" when skipped

    Returns:
        Guidelines followed by the context block
    """
    block = CONTEXT_TEMPLATE.format(
        branch_name=context.branch_name,
        scopes=context.scopes_text,
        is_workspace_repo=str(context.is_workspace_repo).lower(),
        diff=context.diff_text,
        modified_files=group_files_by_type(context.modified_files),
        recent_commits=format_recent_commits(context.recent_commit_subjects),
        analysis=analysis_summary,
    )
    return f"{COMMIT_GUIDELINES}\n{block}"
