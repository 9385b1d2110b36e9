import os
from pathlib import Path

import yaml

from prnotes_core.commit import FOLLOW_REPOS

DEFAULT_CONFIG: dict = {
    "repo": None,  # default "owner/name" for commands that accept --repo
    "follow_repos": sorted(FOLLOW_REPOS),  # owner/name pairs eligible for cross-repo backport tracking
}


def load_config(config_path: str = ".prnotes.yml") -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prnotes.yml in the current directory

    Command options such as --repo take precedence over the result at the
    point of use.
    """
    config = {**DEFAULT_CONFIG, "follow_repos": list(DEFAULT_CONFIG["follow_repos"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Invalid config file {config_path}: expected a mapping of settings.")
        config.update(file_config)

    config["follow_repos"] = validate_follow_repos(config["follow_repos"])

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def validate_follow_repos(entries) -> list:
    """Return ``entries`` as a list, raising ValueError on anything not shaped like owner/name."""
    if entries is None:
        return []
    if isinstance(entries, str):
        entries = [entries]
    if not isinstance(entries, (list, tuple, set, frozenset)):
        raise ValueError(f"Invalid follow_repos {entries!r}: expected a list of 'owner/name' entries.")
    repos = []
    for entry in entries:
        owner, _, name = str(entry).partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(f"Invalid follow_repos entry {entry!r}: expected 'owner/name'.")
        repos.append(f"{owner}/{name}")
    return repos


def split_repo(full_name: str) -> tuple:
    """Split ``owner/name`` into its two parts."""
    owner, _, name = (full_name or "").partition("/")
    if not owner or not name or "/" in name:
        raise ValueError(f"Invalid repository {full_name!r}: expected 'owner/name'.")
    return owner, name
