"""PR Review Helper CLI interface.

Commands:
- analyze: Review open pull requests of a repository
- metrics: Print mock dashboard metrics for a repository
- check: Validate model and GitHub credentials
- init: Initialize configuration
- serve: Run the dashboard API

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer

from prreview import __version__
from prreview.analysis.mock import METRIC_TYPES, metric_data
from prreview.analysis.orchestrator import ReviewOrchestrator
from prreview.config import PrReviewConfig, create_default_config, load_config
from prreview.github.client import (
    AuthError,
    GitHubClient,
    GitHubError,
    NotFoundError,
    PermissionDeniedError,
    parse_repository,
)
from prreview.llm.client import LLMClient
from prreview.models.review import AnalysisResult, PullRequestSummary
from prreview.templates.renderer import ReportRenderer
from prreview.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="pr-review",
    help="Automated pull request review helper",
    add_completion=False,
    no_args_is_help=True,
)

_config: PrReviewConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pr-review {__version__}")
        raise typer.Exit()


def _get_config() -> PrReviewConfig:
    return _config if _config is not None else load_config()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """PR Review Helper - automated pull request review.

    Reviews changed files with a hosted language model and posts the result
    as a pull request comment. Falls back to mock data when live analysis is
    unavailable.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, TypeError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# analyze command
# =============================================================================


async def _list_pull_requests(
    config: PrReviewConfig, owner: str, repo: str
) -> list[PullRequestSummary]:
    async with GitHubClient(config.github) as github:
        return await github.list_pull_requests(owner, repo)


async def _analyze_pull_request(
    config: PrReviewConfig, owner: str, repo: str, pr_number: int
) -> AnalysisResult:
    async with GitHubClient(config.github) as github:
        orchestrator = ReviewOrchestrator(github, LLMClient(config.llm), config)
        return await orchestrator.analyze(owner, repo, pr_number)


async def _post_comment(
    config: PrReviewConfig, owner: str, repo: str, pr_number: int, body: str
) -> None:
    async with GitHubClient(config.github) as github:
        await github.post_comment(owner, repo, pr_number, body)


def _select_pull_requests(pull_requests: list[PullRequestSummary]) -> list[int]:
    """Ask which of several open pull requests to analyze."""
    typer.echo("\nOpen pull requests:")
    for pr in pull_requests:
        typer.echo(f"  #{pr.number} - {pr.title}")

    answer = typer.prompt(
        "Select PRs to analyze (comma-separated numbers, 'all', or blank for none)",
        default="",
        show_default=False,
    ).strip()

    available = [pr.number for pr in pull_requests]
    if answer.lower() == "all":
        return available

    selected: list[int] = []
    for part in answer.replace(" ", ",").split(","):
        if not part:
            continue
        try:
            number = int(part.lstrip("#"))
        except ValueError:
            raise typer.BadParameter(f"Not a pull request number: {part}")
        if number not in available:
            raise typer.BadParameter(f"PR #{number} is not open")
        selected.append(number)
    return selected


def _log_github_error(error: GitHubError) -> None:
    """Log a GitHub failure with guidance for the common statuses."""
    _logger.error(str(error))
    if isinstance(error, AuthError):
        _logger.info("For public repositories the token needs 'public_repo' scope")
        _logger.info("For private repositories the token needs 'repo' scope")
    elif isinstance(error, PermissionDeniedError):
        _logger.info("Posting comments requires 'repo' or 'public_repo' scope")
    elif isinstance(error, NotFoundError):
        _logger.info("Check that the repository exists and that you have access to it")


@app.command()
def analyze(
    repository: Annotated[
        str,
        typer.Argument(help="GitHub repository (owner/repo or GitHub URL)"),
    ],
    pr: Annotated[
        int | None,
        typer.Option(
            "--pr",
            "-p",
            help="Specific PR number to analyze",
            min=1,
        ),
    ] = None,
    all_prs: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Analyze every open PR without prompting",
        ),
    ] = False,
    auto_comment: Annotated[
        bool,
        typer.Option(
            "--auto-comment",
            help="Post the review as a PR comment without asking",
        ),
    ] = False,
    no_comment: Annotated[
        bool,
        typer.Option(
            "--no-comment",
            help="Never post a PR comment",
        ),
    ] = False,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            "-t",
            help="GitHub token (overrides GITHUB_TOKEN and config)",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Analyze pull requests in a repository.

    Exit codes:
        0: Analysis completed
        1: Invalid repository or GitHub error
    """
    if auto_comment and no_comment:
        _logger.error("--auto-comment and --no-comment are mutually exclusive")
        raise typer.Exit(1)

    parsed = parse_repository(repository)
    if parsed is None:
        _logger.error("Invalid repository format. Use 'owner/repo' or a GitHub URL")
        raise typer.Exit(1)
    owner, repo = parsed

    config = _get_config()
    if token:
        config.github.token = token

    renderer = ReportRenderer()

    try:
        if pr is not None:
            pr_numbers = [pr]
        else:
            pull_requests = asyncio.run(_list_pull_requests(config, owner, repo))
            _logger.info(f"Found {len(pull_requests)} open pull requests")
            if not pull_requests:
                raise typer.Exit(0)
            if len(pull_requests) > 1 and not all_prs and not json_output:
                pr_numbers = _select_pull_requests(pull_requests)
                if not pr_numbers:
                    typer.echo("No PRs selected. Exiting.")
                    raise typer.Exit(0)
            else:
                pr_numbers = [p.number for p in pull_requests]

        results: list[dict] = []
        for number in pr_numbers:
            _logger.info(f"Analyzing PR #{number}")
            result = asyncio.run(_analyze_pull_request(config, owner, repo, number))

            if json_output:
                results.append({"prNumber": number, **result.to_dict()})
            else:
                if result.is_mock:
                    typer.echo(
                        "⚠️  Live analysis unavailable; showing mock data "
                        "(check credentials with 'pr-review check')"
                    )
                typer.echo("\n" + renderer.render_report(result, number, f"{owner}/{repo}"))

            if no_comment:
                post = False
            elif auto_comment:
                post = True
            elif json_output:
                post = False
            else:
                post = typer.confirm("Post this analysis as a comment on the PR?", default=False)

            if post:
                asyncio.run(
                    _post_comment(config, owner, repo, number, renderer.render_comment(result))
                )
                _logger.info(f"Comment posted to PR #{number}")

            if not json_output:
                typer.echo("---")

        if json_output:
            typer.echo(json.dumps(results, indent=2))
        else:
            typer.echo("\n✅ PR review completed")
    except GitHubError as e:
        _log_github_error(e)
        raise typer.Exit(1)


# =============================================================================
# metrics command
# =============================================================================


@app.command()
def metrics(
    repository_id: Annotated[
        str,
        typer.Argument(help="Repository identifier (e.g. owner/repo)"),
    ],
    metric_type: Annotated[
        str,
        typer.Option(
            "--type",
            help="Metric type: quality, complexity or issues",
        ),
    ] = "quality",
    days: Annotated[
        int,
        typer.Option(
            "--days",
            help="Days of history for quality and complexity",
            min=0,
        ),
    ] = 30,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Print dashboard metrics (mock data) for a repository."""
    if metric_type not in METRIC_TYPES:
        _logger.error(f"Invalid metric type: {metric_type}. Use one of: {', '.join(METRIC_TYPES)}")
        raise typer.Exit(1)

    data = metric_data(repository_id, metric_type, days)

    if json_output:
        typer.echo(json.dumps({"data": data}, indent=2))
        return

    typer.echo(f"\n📊 {metric_type.capitalize()} metrics for {repository_id}\n")
    for row in data:
        if metric_type == "issues":
            typer.echo(f"  {row['name']:<15} {row['count']:>4}")
        else:
            value = row["score"] if metric_type == "quality" else row["complexity"]
            typer.echo(f"  {row['date'][:10]}  {value:>3}")


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Validate model provider and GitHub credentials.

    Exit codes:
        0: Everything available
        1: A required check failed (reviews will use mock data)
        2: Only optional checks failed (warnings)
    """
    from prreview.utils.preflight import PreflightChecker

    config = _get_config()
    result = PreflightChecker().check_all(config.llm, github_token=config.github.token)
    for warning in config.llm.validate():
        _logger.warning(warning)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo("\n🔍 Preflight Check Results\n")

        for check_result in result.checks:
            status = "✅" if check_result.available else "❌"
            version_str = f" ({check_result.version})" if check_result.version else ""
            required_str = " [required]" if check_result.required else " [optional]"

            typer.echo(f"  {status} {check_result.name}{version_str}{required_str}")
            if check_result.message:
                typer.echo(f"     └─ {check_result.message}")

        typer.echo()

    if result.errors:
        if not json_output:
            typer.echo("❌ Preflight check FAILED (reviews will use mock data)")
            for error in result.errors:
                typer.echo(f"   • {error}")
        raise typer.Exit(1)
    if result.warnings:
        if not json_output:
            typer.echo("⚠️  Preflight check passed with WARNINGS")
            for warning in result.warnings:
                typer.echo(f"   • {warning}")
        raise typer.Exit(2)
    if not json_output:
        typer.echo("✅ All preflight checks passed")
    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize PR Review Helper configuration.

    Creates .prreview/config.yaml with commented defaults.
    """
    config_dir = Path(".prreview")
    config_dir.mkdir(exist_ok=True)
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config())

    typer.echo("\n✅ PR Review Helper configuration initialized")
    typer.echo(f"   Config: {config_file}")
    typer.echo("\n💡 Set GITHUB_TOKEN and AWS credentials, then run: pr-review check")


# =============================================================================
# serve command
# =============================================================================


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option(
            "--host",
            help="Bind address (default from config)",
        ),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(
            "--port",
            help="Port (default from config)",
        ),
    ] = None,
) -> None:
    """Run the dashboard API server."""
    import uvicorn

    from prreview.server import create_app

    config = _get_config()
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    _logger.info(f"Serving dashboard API on http://{bind_host}:{bind_port}")
    uvicorn.run(create_app(config), host=bind_host, port=bind_port)


if __name__ == "__main__":
    app()
