"""CLI entry point for prnotes.

Commands:
  parse  parse a commit message into its release-note fields
  notes  extract the release note from a PR body and render the PR comment
"""

from __future__ import annotations

import importlib.metadata

import click

from prnotes_cli.commands.notes import notes_cmd
from prnotes_cli.commands.parse import parse_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prnotes"),
    prog_name="prnotes",
)
@click.option(
    "--config",
    "config_path",
    default=".prnotes.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRNOTES_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Release-note metadata from commit messages and pull requests."""
    from prnotes_core.config import load_config
    from prnotes_cli.auth import resolve_github_token

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(parse_cmd)
main.add_command(notes_cmd)
