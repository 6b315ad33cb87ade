"""Command-line interface for autorelease.

Provides commands for:
- run: Release the current commit if its message asks for it
- next-version: Compute the version following a tag
- check-message: Show how a commit message is interpreted
- assets: List the files selected by asset patterns
- rollback: Delete a release and its tag on GitHub
- init-config: Generate a configuration file
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from autorelease import __version__
from autorelease.commits import CommitCompliance, classify_conventional
from autorelease.config.defaults import write_default_config
from autorelease.config.loader import load_repository_context, load_settings
from autorelease.exceptions import HostApiError, ReleaseError
from autorelease.publishers.github import GitHubClient, guess_content_type
from autorelease.utils.actions import report_failure, set_output
from autorelease.utils.fsglob import resolve_asset_paths
from autorelease.utils.version import add_tag_prefix, bump_version
from autorelease.workflow import (
    RunStatus,
    create_workflow,
    execute_release,
    resolve_release_type,
)

app = typer.Typer(
    name="autorelease",
    help="Commit-triggered release automation for GitHub repositories",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"autorelease version {__version__}")
        raise typer.Exit()


def fail(error: ReleaseError) -> None:
    """Report a fatal error and exit with its code."""
    report_failure(str(error))
    raise typer.Exit(code=error.exit_code)


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Commit-triggered release automation for GitHub repositories.

    Put '!release: major', '!release: minor' or '!release: patch' in a
    commit message on the release branch to tag, build and publish a
    GitHub release for it.
    """


@app.command(name="run")
def run_release(
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file (searched for when omitted)",
    ),
    dry_run: bool = typer.Option(  # noqa: B008
        False,
        "--dry-run",
        "-n",
        help="Show what would be done without writing to GitHub or running commands",
    ),
    message: str | None = typer.Option(  # noqa: B008
        None,
        "--message",
        "-m",
        help="Commit message to use instead of the triggering event's",
    ),
    cwd: Path | None = typer.Option(  # noqa: B008
        None,
        "--cwd",
        help="Repository checkout (defaults to the current directory)",
    ),
) -> None:
    """Release the current commit if its message contains a release command.

    Exits 0 when the release succeeds or when no release was requested.
    """
    project_root = (cwd or Path.cwd()).absolute()

    try:
        settings = load_settings(config, project_root)
        context = load_repository_context()
        workflow = create_workflow(
            settings,
            context,
            project_root,
            message=message,
            dry_run=dry_run,
        )
    except ReleaseError as e:
        fail(e)
        return

    outcome = execute_release(workflow)

    set_output("status", outcome.status.value)
    if outcome.tag_name:
        set_output("tag", outcome.tag_name)
    if outcome.release_url:
        set_output("release_url", outcome.release_url)

    if outcome.status is RunStatus.FAILED and outcome.error is not None:
        fail(outcome.error)


@app.command(name="next-version")
def next_version(
    kind: str = typer.Argument(  # noqa: B008
        ...,
        help="Bump type: major, minor, patch",
    ),
    last_tag: str | None = typer.Option(  # noqa: B008
        None,
        "--last-tag",
        "-t",
        help="Tag of the previous release (omit for a first release)",
    ),
    prefix: str = typer.Option(  # noqa: B008
        "",
        "--prefix",
        "-p",
        help="Prefix of the printed tag",
    ),
) -> None:
    """Print the tag that would follow LAST_TAG.

    Examples:
        autorelease next-version minor                 # 0.1.0
        autorelease next-version patch -t v1.2.3 -p v  # v1.2.4
    """
    try:
        console.print(add_tag_prefix(bump_version(last_tag, kind.lower()), prefix))
    except ReleaseError as e:
        fail(e)


@app.command(name="check-message")
def check_message(
    message: str = typer.Argument(..., help="Commit message to inspect"),  # noqa: B008
) -> None:
    """Show the release command and conventional-commit status of a message."""
    try:
        release_type = resolve_release_type(message)
    except ReleaseError as e:
        fail(e)
        return

    compliance = classify_conventional(message)

    table = Table(title="Commit Message")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Release", release_type or "[dim]none[/dim]")
    table.add_row(
        "Conventional",
        "[green]yes[/green]"
        if compliance is CommitCompliance.COMPLIANT
        else "[yellow]no[/yellow]",
    )
    console.print(table)


@app.command()
def assets(
    patterns: list[str] | None = typer.Argument(  # noqa: B008
        None,
        help="Glob patterns (defaults to the ASSET_PATTERNS input)",
        show_default=False,
    ),
    cwd: Path | None = typer.Option(  # noqa: B008
        None,
        "--cwd",
        help="Directory the patterns are relative to",
    ),
    env_patterns: str = typer.Option(  # noqa: B008
        "",
        "--patterns",
        envvar="INPUT_ASSET_PATTERNS",
        help="Whitespace separated patterns",
        show_envvar=True,
    ),
) -> None:
    """List the files that would be uploaded as release assets."""
    root = (cwd or Path.cwd()).absolute()
    selected = list(patterns or env_patterns.split())
    if not selected:
        console.print("[yellow]No asset patterns given[/yellow]")
        raise typer.Exit(code=1)

    try:
        paths = resolve_asset_paths(selected, root)
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    table = Table(title=f"Assets ({len(paths)})")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Content Type")
    for path in paths:
        table.add_row(
            escape(str(path.relative_to(root))),
            str(path.stat().st_size),
            guess_content_type(path.name),
        )
    console.print(table)


@app.command()
def rollback(
    tag: str = typer.Argument(  # noqa: B008
        ...,
        help="Tag of the failed release",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        "-f",
        help="Force rollback without confirmation",
    ),
    keep_tag: bool = typer.Option(  # noqa: B008
        False,
        "--keep-tag",
        help="Only delete the release, keep the tag",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """Delete a GitHub release and its tag.

    Releases are never rolled back automatically; use this after a run
    failed between creating the tag and finishing the release.

    Examples:
        autorelease rollback 1.2.3
        autorelease rollback v1.2.3 --force
    """
    if not force:
        console.print("\n[yellow]This will:[/yellow]")
        console.print(f"  - Delete GitHub release: {escape(tag)}")
        if not keep_tag:
            console.print(f"  - Delete tag: {escape(tag)}")
        console.print()
        if not typer.confirm(f"Proceed with rollback of {tag}?"):
            console.print("[yellow]Rollback cancelled[/yellow]")
            raise typer.Exit()

    try:
        settings = load_settings(config, Path.cwd())
        context = load_repository_context()
        client = GitHubClient(
            token=settings.github_token.get_secret_value(),
            owner=context.owner,
            repo=context.repo,
            api_url=context.api_url,
        )
    except ReleaseError as e:
        fail(e)
        return

    results: list[str] = []
    errors: list[str] = []

    try:
        release = client.get_release_by_tag(tag)
        if release is None:
            results.append(f"[yellow]⊘[/yellow] GitHub release does not exist: {escape(tag)}")
        else:
            client.delete_release(release.id)
            results.append(f"[green]✓[/green] Deleted GitHub release: {escape(tag)}")
    except HostApiError as e:
        errors.append(f"[red]✗[/red] Failed to delete GitHub release: {escape(str(e))}")

    if not keep_tag:
        try:
            client.delete_tag_ref(tag)
            results.append(f"[green]✓[/green] Deleted tag: {escape(tag)}")
        except HostApiError as e:
            if e.status in (404, 422):
                results.append(f"[yellow]⊘[/yellow] Tag does not exist: {escape(tag)}")
            else:
                errors.append(f"[red]✗[/red] Failed to delete tag: {escape(str(e))}")

    for msg in results:
        console.print(msg)

    if errors:
        console.print(f"\n[red]Encountered {len(errors)} error(s):[/red]")
        for error in errors:
            console.print(error)
        raise typer.Exit(code=1)

    console.print(f"\n[green]Rollback of {escape(tag)} completed successfully[/green]")


@app.command(name="init-config")
def init_config(
    output: Path = typer.Option(  # noqa: B008
        Path("autorelease.yml"),
        "--output",
        "-o",
        help="Output path for configuration file",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Generate a configuration file with detected defaults.

    Examples:
        autorelease init-config
        autorelease init-config -o .autorelease.yml
    """
    if output.exists() and not force:
        console.print(f"[red]Configuration already exists:[/red] {output}")
        console.print("Use --force to overwrite")
        raise typer.Exit(code=1)

    try:
        write_default_config(output)
    except ReleaseError as e:
        fail(e)
        return
    console.print(f"[green]Configuration written to:[/green] {output}")


if __name__ == "__main__":
    app()
