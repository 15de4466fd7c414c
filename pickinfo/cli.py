"""CLI entry point for pickinfo."""

from __future__ import annotations

import logging

import typer
from github.GithubException import GithubException
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from pickinfo.collect import collect_picks
from pickinfo.config import Config, is_valid_release
from pickinfo.github.client import GitHubClient
from pickinfo.github.queries import CommitNotFoundError, GitHubQueries, ProjectNotFoundError
from pickinfo.report import SORT_DIRECTIONS, render_report

app = typer.Typer(help="Reconcile release pick requests against landed commits.")
console = Console()
err_console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config() -> Config:
    config = Config.load()
    issues = config.validate()
    if issues:
        for issue in issues:
            rprint(f"[red]Config error: {issue}[/red]")
        raise typer.Exit(1)
    return config


@app.command()
def collect(
    target_release: str = typer.Argument(help="Target release, e.g. 0.76.0-rc3"),
    sort: str = typer.Option("asc", "--sort", help="Sort by date: asc or desc"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show pick titles"),
    debug: bool = typer.Option(False, "--debug", help="Log GitHub lookups"),
) -> None:
    """Report picks and items to discuss for a release candidate."""
    _configure_logging(debug)

    if not is_valid_release(target_release):
        rprint("[red]Please provide a target release in the format of '0.76.0-rc3'[/red]")
        raise typer.Exit(1)
    if sort not in SORT_DIRECTIONS:
        rprint(f"[red]--sort must be one of: {', '.join(SORT_DIRECTIONS)}[/red]")
        raise typer.Exit(1)

    config = _load_config()
    console.print(f"Target release {target_release}", highlight=False)

    client = GitHubClient(token=config.github_token, repo=config.repo)
    try:
        run = collect_picks(GitHubQueries(client, config), target_release)
    except (CommitNotFoundError, ProjectNotFoundError) as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except GithubException as e:
        rprint(f"[red]GitHub error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()

    lines = render_report(
        run.picks,
        run.discuss,
        run.tally,
        direction=sort,
        verbose=verbose,
        max_width=console.width,
    )
    for line in lines:
        console.print(line, highlight=False)


@app.command()
def check() -> None:
    """Validate configuration without querying GitHub."""
    config = _load_config()
    rprint("[green]Configuration OK[/green]")
    rprint(f"  Repository:    {config.repo}")
    rprint(f"  Project owner: {config.project_owner}")
    rprint(f"  Project title: {config.project_title}")
    rprint(f"  Inbox column:  {config.inbox_status}")


if __name__ == "__main__":
    app()
