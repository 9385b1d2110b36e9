"""parse command: turn a commit message into structured release-note fields."""

from __future__ import annotations

import json

import click
from github import GithubException
from rich.console import Console
from rich.table import Table

from prnotes_core.commit import CommitRecord, parse_commit
from prnotes_core.config import split_repo
from prnotes_core.gh.pull_request import get_commit_message, get_repo

console = Console()


def _print_record(record: CommitRecord) -> None:
    table = Table(title="Parsed commit", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in record.to_dict().items():
        if isinstance(value, dict):
            value = "{owner}/{repo}#{number}".format(**value) + (f" ({value['branch']})" if "branch" in value else "")
        table.add_row(key, str(value))
    console.print(table)


@click.command("parse")
@click.argument("message_file", type=click.File("r"), default="-", required=False)
@click.option("--repo", default=None, help="GitHub repository (owner/name). Defaults to `repo` in the config file.")
@click.option("--sha", default=None, help="Fetch the message of this commit from GitHub instead of reading MESSAGE_FILE.")
@click.option("--json", "as_json", is_flag=True, help="Print the parsed record as JSON.")
@click.pass_context
def parse_cmd(ctx, message_file, repo: str | None, sha: str | None, as_json: bool):
    """Parse a commit message read from MESSAGE_FILE (or stdin).

    References without an explicit repository, like `(#123)` or
    `Backport of #123`, are attributed to --repo.
    """
    config = ctx.obj["config"]
    repo = repo or config.get("repo")
    if not repo:
        raise click.UsageError("No repository given. Pass --repo owner/name or set `repo` in .prnotes.yml.")
    try:
        owner, name = split_repo(repo)
    except ValueError as e:
        raise click.UsageError(str(e))

    if sha:
        from prnotes_cli.auth import require_github_token

        token = require_github_token(config)
        try:
            message = get_commit_message(get_repo(repo, token=token), sha)
        except GithubException as e:
            raise click.ClickException(f"Could not fetch commit {sha} from {repo}: {e}")
    else:
        message = message_file.read()

    record = parse_commit(message, owner, name, follow_repos=config.get("follow_repos", []))

    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
    else:
        _print_record(record)
