"""notes command: show (and optionally post) the release note for a pull request."""

from __future__ import annotations

import click
from github import GithubException
from rich.console import Console

from prnotes_core.gh.pull_request import get_pull, get_repo, upsert_notes_comment
from prnotes_core.notes import extract_note, format_note_comment

console = Console()


@click.command("notes")
@click.option("--body-file", type=click.File("r"), default=None, help="Read the PR body from a file ('-' for stdin).")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Defaults to `repo` in the config file.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number to fetch the body from.")
@click.option("--post", is_flag=True, help="Create or update the release-notes comment on the pull request.")
@click.pass_context
def notes_cmd(ctx, body_file, repo: str | None, pr_number: int | None, post: bool):
    """Extract the release note from a PR body and print the comment text.

    \b
    Offline:  prnotes notes --body-file body.md
    GitHub:   prnotes notes --repo owner/name --pr 123 [--post]
    """
    if (body_file is None) == (pr_number is None):
        raise click.UsageError("Pass exactly one of --body-file or --pr.")
    if post and pr_number is None:
        raise click.UsageError("--post requires --pr.")

    config = ctx.obj["config"]

    pr = None
    if body_file is not None:
        body = body_file.read()
    else:
        from prnotes_cli.auth import require_github_token

        repo = repo or config.get("repo")
        if not repo:
            raise click.UsageError("No repository given. Pass --repo owner/name or set `repo` in .prnotes.yml.")
        token = require_github_token(config)
        try:
            pr = get_pull(get_repo(repo, token=token), pr_number)
        except GithubException as e:
            raise click.ClickException(f"Could not fetch PR #{pr_number} from {repo}: {e}")
        body = pr.body or ""

    comment = format_note_comment(extract_note(body))
    click.echo(comment)

    if post:
        try:
            status = upsert_notes_comment(pr, comment)
        except GithubException as e:
            raise click.ClickException(f"Could not post comment on PR #{pr_number}: {e}")
        console.print(f"[green]Release-notes comment {status} on #{pr_number}.[/green]")
