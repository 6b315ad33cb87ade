"""Release workflow orchestration.

Runs the release triggered by a commit message, one step at a time:
1. Check the working tree is clean
2. Check the current branch
3. Resolve the next version from the latest release
4. Create the tag on GitHub
5. Collect the commits since the last release
6. Run the lint/test and build commands
7. Generate the changelog
8. Create the GitHub release
9. Upload assets
10. Send the notification

Any ReleaseError stops the run. Nothing already created on the host is
rolled back; see the 'rollback' command for manual cleanup.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from autorelease.changelog import ChangelogDocument, build_changelog
from autorelease.commits import (
    CommitRecord,
    find_nonconventional,
    has_trigger_marker,
    parse_release_trigger,
)
from autorelease.config.models import ActionSettings, RepositoryContext
from autorelease.exceptions import (
    AssetError,
    CommandError,
    ConfigurationError,
    GitError,
    NotificationError,
    PreconditionError,
    ReleaseError,
)
from autorelease.git import queries as git_queries
from autorelease.publishers.base import (
    Notifier,
    ReleaseHandle,
    ReleaseHost,
    ReleaseRequest,
    UploadedAsset,
)
from autorelease.publishers.discord import DiscordNotifier
from autorelease.publishers.github import GitHubClient
from autorelease.summary import ChangelogSummarizer
from autorelease.utils.actions import report_warning
from autorelease.utils.fsglob import resolve_asset_paths
from autorelease.utils.shell import ShellError, stream
from autorelease.utils.version import BumpType, add_tag_prefix, bump_version

console = Console()


class RunStatus(Enum):
    """Terminal state of a release run."""

    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Result of a workflow step."""

    success: bool
    message: str
    details: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class RunOutcome:
    """Result of a whole run."""

    status: RunStatus
    tag_name: str = ""
    release_url: str = ""
    error: ReleaseError | None = None

    @property
    def exit_code(self) -> int:
        if self.status is RunStatus.FAILED:
            return self.error.exit_code if self.error else 1
        return 0


def resolve_release_type(message: str) -> BumpType | None:
    """Read the release type requested by a commit message.

    Returns:
        The bump kind, or None when the message does not ask for a release

    Raises:
        ConfigurationError: If '!release' is present without a valid kind
    """
    release_type = parse_release_trigger(message)
    if release_type is None and has_trigger_marker(message):
        raise ConfigurationError(
            "Malformed release command in commit message",
            details="Found '!release' but no valid release type",
            fix_hint="Use '!release: major', '!release: minor' or '!release: patch'",
        )
    return release_type


@dataclass
class ReleaseWorkflow:
    """Orchestrates a commit-triggered release."""

    settings: ActionSettings
    host: ReleaseHost
    commit_message: str
    head_sha: str
    project_root: Path
    repository: str = ""
    notifier: Notifier | None = None
    summarizer: ChangelogSummarizer | None = None
    dry_run: bool = False

    # State tracking
    release_type: BumpType | None = None
    last_tag: str | None = None
    version: str = ""
    tag_name: str = ""
    tag_created: bool = False
    commits: list[CommitRecord] = field(default_factory=list)
    changelog: ChangelogDocument | None = None
    release: ReleaseHandle | None = None
    uploaded: list[UploadedAsset] = field(default_factory=list)

    def steps(self) -> list[tuple[str, Callable[[], WorkflowResult]]]:
        return [
            ("Checking working tree", self.check_working_tree),
            ("Checking branch", self.check_branch),
            ("Resolving version", self.resolve_version),
            ("Creating tag", self.create_tag),
            ("Collecting commits", self.collect_commits),
            ("Running build and tests", self.run_commands),
            ("Generating changelog", self.generate_changelog),
            ("Creating GitHub release", self.publish_release),
            ("Uploading assets", self.upload_assets),
            ("Sending notification", self.send_notification),
        ]

    def run(self) -> RunOutcome:
        """Execute the release workflow.

        Returns:
            RunOutcome; FAILED outcomes carry the error that stopped the run
        """
        try:
            self.release_type = resolve_release_type(self.commit_message)
        except ReleaseError as e:
            console.print(f"[red]  Error: {escape(str(e))}[/red]")
            return RunOutcome(RunStatus.FAILED, error=e)

        if self.release_type is None:
            console.print("[dim]No release command in commit message, nothing to do[/dim]")
            return RunOutcome(RunStatus.SKIPPED)

        console.print(f"Release type: [bold]{self.release_type}[/bold]")

        for step_name, step_func in self.steps():
            console.print(f"\n[bold cyan]>[/bold cyan] {step_name}...")

            try:
                result = step_func()
            except ReleaseError as e:
                console.print(f"[red]  Error: {escape(e.message)}[/red]")
                if e.details:
                    console.print(f"[dim]  {escape(e.details)}[/dim]")
                return RunOutcome(RunStatus.FAILED, tag_name=self.tag_name, error=e)

            console.print(f"[green]  {escape(result.message)}[/green]")
            if result.details:
                console.print(f"[dim]  {escape(result.details)}[/dim]")

        return RunOutcome(
            RunStatus.SUCCEEDED,
            tag_name=self.tag_name,
            release_url=self.release.html_url if self.release else "",
        )

    def check_working_tree(self) -> WorkflowResult:
        """Refuse to release with uncommitted changes."""
        if git_queries.is_clean(cwd=self.project_root):
            return WorkflowResult(success=True, message="Working tree is clean")

        files = git_queries.get_uncommitted_files(cwd=self.project_root)
        file_list = "\n".join(f"  - {f}" for f in files[:10])
        if len(files) > 10:
            file_list += f"\n  ... and {len(files) - 10} more"
        raise PreconditionError(
            "Working tree has uncommitted changes",
            details=f"Uncommitted changes detected:\n{file_list}",
            fix_hint="Commit or remove the changes (build steps must not modify tracked files)",
        )

    def check_branch(self) -> WorkflowResult:
        """Refuse to release from any branch but the allowed one."""
        expected = self.settings.allowed_branch
        current = git_queries.get_current_branch(cwd=self.project_root)
        if current != expected:
            raise PreconditionError(
                f"Releases are only allowed from branch '{expected}', current branch is '{current}'",
                fix_hint=f"Merge into '{expected}' or set ALLOWED_BRANCH",
            )
        return WorkflowResult(success=True, message=f"On branch {current}")

    def resolve_version(self) -> WorkflowResult:
        """Compute the next version from the latest published release."""
        self.last_tag = self.host.get_latest_release_tag()
        self.version = bump_version(self.last_tag, self.release_type)
        self.tag_name = add_tag_prefix(self.version, self.settings.tag_prefix)
        return WorkflowResult(
            success=True,
            message=f"New tag: {self.tag_name}",
            details=f"Last tag: {self.last_tag or 'none (first release)'}",
        )

    def create_tag(self) -> WorkflowResult:
        if self.dry_run:
            return WorkflowResult(
                success=True,
                message=f"Would create tag {self.tag_name} at {self.head_sha[:7]}",
            )
        self.host.create_tag_ref(self.tag_name, self.head_sha)
        self.tag_created = True
        return WorkflowResult(
            success=True,
            message=f"Created tag {self.tag_name} at {self.head_sha[:7]}",
        )

    def collect_commits(self) -> WorkflowResult:
        """Fetch commits since the last release and check their messages.

        Non-conventional messages are reported but never stop the release.
        """
        self.commits = self.host.get_commits_since(self.last_tag, self.head_sha)

        invalid = find_nonconventional(self.commits)
        if invalid:
            titles = "\n".join(f"  {c.short_sha} {c.title}" for c in invalid)
            report_warning(
                f"Found {len(invalid)} non-conventional commit message(s):\n{titles}"
            )

        return WorkflowResult(
            success=True,
            message=f"Found {len(self.commits)} commit(s) since {self.last_tag or 'the first commit'}",
            data={"nonconventional": len(invalid)},
        )

    def run_commands(self) -> WorkflowResult:
        """Run the lint/test command, then the build command."""
        commands = [
            ("lint and tests", self.settings.lint_and_tests_command),
            ("build", self.settings.build_command),
        ]
        configured = [(label, cmd) for label, cmd in commands if cmd]
        if not configured:
            return WorkflowResult(success=True, message="No build or test commands configured")

        for label, cmd in configured:
            if self.dry_run:
                console.print(f"[dim]  Would run {label}: {escape(cmd)}[/dim]")
                continue
            console.print(f"  Running {label}: [bold]{escape(cmd)}[/bold]")
            self._run_command(label, cmd)

        verb = "Would run" if self.dry_run else "Ran"
        return WorkflowResult(
            success=True,
            message=f"{verb} {', '.join(label for label, _ in configured)}",
        )

    def _run_command(self, label: str, cmd: str) -> None:
        try:
            stream(cmd, cwd=self.project_root)
        except ShellError as e:
            raise CommandError(
                f"The {label} command failed with exit code {e.returncode}",
                details=cmd,
                fix_hint="Fix the failure and push a new release commit",
            ) from e
        except (OSError, ValueError) as e:
            raise CommandError(
                f"The {label} command could not be started",
                details=f"{cmd}: {e}",
            ) from e

    def generate_changelog(self) -> WorkflowResult:
        self.changelog = build_changelog(self.commits, self.summarizer)
        with_summary = " with summary" if self.changelog.summary else ""
        return WorkflowResult(
            success=True,
            message=f"Changelog with {len(self.changelog.lines)} entries{with_summary}",
        )

    def publish_release(self) -> WorkflowResult:
        body = self.changelog.render() if self.changelog else ""
        request = ReleaseRequest(
            tag_name=self.tag_name,
            name=f"Release {self.tag_name}",
            body=body,
            draft=self.settings.draft_release,
            prerelease=self.settings.prerelease,
        )
        flags = [
            flag
            for flag, enabled in (("draft", request.draft), ("prerelease", request.prerelease))
            if enabled
        ]
        suffix = f" ({', '.join(flags)})" if flags else ""

        if self.dry_run:
            return WorkflowResult(
                success=True,
                message=f"Would create release '{request.name}'{suffix}",
                details=body,
            )

        self.release = self.host.create_release(request)
        return WorkflowResult(
            success=True,
            message=f"Created release '{request.name}'{suffix}",
            details=self.release.html_url or None,
        )

    def upload_assets(self) -> WorkflowResult:
        """Upload every regular file matched by the asset patterns, in order."""
        patterns = self.settings.asset_patterns
        if not patterns:
            return WorkflowResult(success=True, message="No asset patterns configured")

        try:
            paths = resolve_asset_paths(patterns, self.project_root)
        except OSError as e:
            raise AssetError(
                "Failed to resolve asset patterns",
                details=f"{e.filename or ''}: {e.strerror or e}",
            ) from e

        if not paths:
            report_warning(f"No files match asset patterns: {' '.join(patterns)}")
            return WorkflowResult(success=True, message="No assets to upload")

        for path in paths:
            console.print(f"  [green]✓[/green] {escape(self._display_path(path))}")

        if self.dry_run or self.release is None:
            return WorkflowResult(success=True, message=f"Would upload {len(paths)} asset(s)")

        for path in paths:
            asset = self.host.upload_release_asset(self.release, path)
            self.uploaded.append(asset)
            console.print(f"[dim]  Uploaded {escape(asset.name)} ({asset.content_type})[/dim]")

        return WorkflowResult(success=True, message=f"Uploaded {len(self.uploaded)} asset(s)")

    def _display_path(self, path: Path) -> str:
        try:
            return os.path.relpath(path, self.project_root)
        except ValueError:
            return str(path)

    def send_notification(self) -> WorkflowResult:
        """Announce the release; delivery problems only produce a warning."""
        if self.notifier is None:
            return WorkflowResult(success=True, message="No webhook configured")

        message = f":tada: Released {self.tag_name} in {self.repository}"
        if self.dry_run:
            return WorkflowResult(success=True, message=f"Would notify: {message}")

        try:
            self.notifier.notify(message)
        except NotificationError as e:
            report_warning(f"Notification not delivered: {e}")
            return WorkflowResult(success=True, message="Notification failed (ignored)")
        return WorkflowResult(success=True, message="Notification sent")


def resolve_commit_message(
    context: RepositoryContext,
    project_root: Path,
    override: str | None = None,
) -> str:
    """Find the message of the commit that triggered the run.

    Order: explicit override, the push event's head commit, then the
    local HEAD commit.
    """
    if override is not None:
        return override
    message = context.commit_message()
    if message is not None:
        return message
    try:
        return git_queries.get_commit_message(cwd=project_root)
    except GitError:
        return ""


def create_workflow(
    settings: ActionSettings,
    context: RepositoryContext,
    project_root: Path,
    message: str | None = None,
    dry_run: bool = False,
) -> ReleaseWorkflow:
    """Wire a ReleaseWorkflow to GitHub, the webhook and the summary API.

    Raises:
        ConfigurationError: If the repository cannot be determined
        GitError: If the head commit cannot be resolved locally
    """
    head_sha = context.sha or git_queries.get_commit_sha(cwd=project_root)
    host = GitHubClient(
        token=settings.github_token.get_secret_value(),
        owner=context.owner,
        repo=context.repo,
        api_url=context.api_url,
    )
    notifier = DiscordNotifier(settings.discord_webhook) if settings.discord_webhook else None
    summarizer = None
    if settings.openai_api_key is not None:
        summarizer = ChangelogSummarizer(
            api_key=settings.openai_api_key.get_secret_value(),
            model=settings.openai_api_model,
            base_url=settings.openai_api_base_url,
        )

    return ReleaseWorkflow(
        settings=settings,
        host=host,
        commit_message=resolve_commit_message(context, project_root, message),
        head_sha=head_sha,
        project_root=project_root,
        repository=context.repository,
        notifier=notifier,
        summarizer=summarizer,
        dry_run=dry_run,
    )


def execute_release(workflow: ReleaseWorkflow) -> RunOutcome:
    """Run a workflow between start and result panels."""
    console.print(
        Panel(
            f"[bold]{escape(workflow.repository or str(workflow.project_root))}[/bold]\n"
            f"Commit: {workflow.head_sha[:7]}\n"
            f"{'[yellow]DRY RUN[/yellow]' if workflow.dry_run else ''}",
            title="Starting Release",
            border_style="cyan",
        )
    )

    outcome = workflow.run()

    if outcome.status is RunStatus.SUCCEEDED:
        console.print(
            Panel(
                f"[bold green]Release {outcome.tag_name} completed successfully![/bold green]",
                border_style="green",
            )
        )
    elif outcome.status is RunStatus.FAILED:
        hint = (
            f"\nTag {outcome.tag_name} was created by this run\n"
            f"Run 'autorelease rollback {outcome.tag_name}' to clean up"
            if workflow.tag_created
            else ""
        )
        console.print(
            Panel(
                f"[bold red]Release failed[/bold red]{hint}",
                border_style="red",
            )
        )

    return outcome
