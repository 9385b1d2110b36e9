from __future__ import annotations

import logging

from github import Github

from prnotes_core.constants import NO_NOTES_BODY, NOTES_LEAD

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_commit_message(repo, sha: str) -> str:
    return repo.get_commit(sha).commit.message


def find_notes_comment(pr):
    """Return the most recent release-notes comment on the PR, or None."""
    found = None
    for comment in pr.get_issue_comments():
        body = comment.body or ""
        if body.startswith(NOTES_LEAD) or body.startswith(NO_NOTES_BODY):
            found = comment
    return found


def upsert_notes_comment(pr, body: str) -> str:
    """Create or refresh the release-notes comment and report what happened."""
    existing = find_notes_comment(pr)
    if existing is None:
        pr.create_issue_comment(body)
        logger.debug("Created release-notes comment on PR #%s", pr.number)
        return "created"
    if existing.body == body:
        return "unchanged"
    existing.edit(body)
    logger.debug("Updated release-notes comment %s on PR #%s", existing.id, pr.number)
    return "updated"
