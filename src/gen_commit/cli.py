"""Command-line interface for gen-commit."""

import asyncio
import logging
from pathlib import Path

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from gen_commit import __version__
from gen_commit.config import GenerationSettings, build_settings
from gen_commit.errors import ConfigurationError, NoChangesError, PipelineError
from gen_commit.git import GitRepository
from gen_commit.models import GenerationOutcome
from gen_commit.orchestrator import CommitMessageGenerator, usage_breakdown

app = typer.Typer(
    name="gen-commit",
    help="Generate conventional commit messages for staged changes using AI",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    """Route gen_commit logs through rich; steps are shown only with --verbose."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    logging.getLogger("gen_commit").setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )


def _version_callback(value: bool) -> None:
    if value:
        print(f"gen-commit {__version__}")
        raise typer.Exit()


def _display_usage(outcome: GenerationOutcome) -> None:
    """Display per-call and aggregate token usage."""
    usage_table = Table(title="Token Usage", show_header=True, header_style="bold magenta")
    usage_table.add_column("Call", style="cyan", no_wrap=True)
    usage_table.add_column("Input", style="green", justify="right")
    usage_table.add_column("Output", style="green", justify="right")
    usage_table.add_column("Total", style="yellow", justify="right")

    for label, usage in usage_breakdown(outcome):
        usage_table.add_row(
            label,
            str(usage.input_tokens),
            str(usage.output_tokens),
            str(usage.total_tokens),
        )

    console.print(usage_table)


def _ask_confirmation() -> str:
    """Read one confirmation line; end of input counts as no."""
    try:
        return Prompt.ask(
            "\nCommit with this message? (y/N)", default="", show_default=False
        )
    except EOFError:
        return ""


async def _run(settings: GenerationSettings) -> None:
    """Run the pipeline and handle the confirmation step."""
    repository = GitRepository()
    if not await repository.is_repository():
        err_console.print("not a git repository")
        raise typer.Exit(1)

    generator = CommitMessageGenerator(repository, settings)

    try:
        outcome = await generator.generate()
    except NoChangesError as e:
        err_console.print(str(e))
        raise typer.Exit(1)

    console.print("Generated commit message:\n")
    console.print(Panel(Text(outcome.message), border_style="green"))
    _display_usage(outcome)

    if settings.dry_run:
        return

    if await generator.confirm_and_commit(outcome.message, _ask_confirmation):
        print("[green]✓[/green] Successfully committed!")
    else:
        print("Commit cancelled.")


@app.command()
def main(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show the generated commit message without committing",
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model specifier as <provider>:<model>, provider is 'anthropic' or 'openai' "
        "(default: anthropic:claude-sonnet-4-20250514)",
        envvar="GEN_COMMIT_MODEL",
    ),
    max_tokens: int | None = typer.Option(
        None,
        "--max-tokens",
        "-t",
        help="Maximum number of tokens in each model response (default: 500)",
        envvar="GEN_COMMIT_MAX_TOKENS",
    ),
    ignore: str | None = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Comma-separated paths or patterns to leave out of the diff",
        envvar="GEN_COMMIT_IGNORE",
    ),
    no_analysis: bool = typer.Option(
        False,
        "--no-analysis",
        help="Skip the diff analysis call and generate the message directly",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show each pipeline step and its output"
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="YAML settings file (default: ~/.gen-commit/config.yaml)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Generate a conventional commit message for the staged changes.

    Examples:
        gen-commit
        gen-commit --dry-run --model openai:gpt-4.1
        gen-commit --ignore package-lock.json,dist --no-analysis
    """
    try:
        settings = build_settings(
            config_path=config,
            model=model,
            max_tokens=max_tokens,
            ignore=ignore,
            analysis_enabled=False if no_analysis else None,
            dry_run=dry_run or None,
            verbose=verbose or None,
        )
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    _configure_logging(settings.verbose)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        print("\n[red]Operation cancelled by user[/red]")
        raise typer.Exit(130)
    except PipelineError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
