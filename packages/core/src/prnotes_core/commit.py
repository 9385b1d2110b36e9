"""Commit message parsing.

Looks for the project's conventions in a commit message:

    'semantic: some description'                  -- sets type, subject
    'some description (#99999)'                   -- sets subject, pr
    'Fixes #3333'                                 -- sets issue_number
    'Merge pull request #99999 from ${branch}'    -- sets pr (with branch)
    'This reverts commit ${sha}.'                 -- sets revert_hash
    line starting with 'BREAKING CHANGE'          -- sets type
    'Backport of #99999'                          -- sets pr

Each rule is a pure ``(record, context) -> record`` transform. Rules run
in a fixed order and later ones may override fields set by earlier ones.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from prnotes_core.notes import find_note_in_commit_body

logger = logging.getLogger(__name__)

BREAK_TYPES = frozenset({"breaking-change"})
DOC_TYPES = frozenset({"doc", "docs"})
FEAT_TYPES = frozenset({"feat", "feature"})
FIX_TYPES = frozenset({"fix"})
OTHER_TYPES = frozenset(
    {"spec", "build", "test", "chore", "deps", "refactor", "tools", "vendor", "perf", "style", "ci"}
)
KNOWN_TYPES = BREAK_TYPES | DOC_TYPES | FEAT_TYPES | FIX_TYPES | OTHER_TYPES

# Repositories whose PRs we track when a commit is a manual cross-repo backport.
FOLLOW_REPOS = frozenset({"electron/electron", "electron/libchromiumcontent", "electron/node"})

_PR_SUFFIX_RE = re.compile(r"^(.*)\s\(#(\d+)\)$", re.ASCII)
_SEMANTIC_RE = re.compile(r"^([\w-]+):\s(.*)$", re.ASCII)
_MERGE_RE = re.compile(r"^Merge pull request #(\d+) from (.*)$", re.ASCII)
_BACKPORT_OF_RE = re.compile(r"\bBackport of #(\d+)\b", re.ASCII)
# https://help.github.com/articles/closing-issues-using-keywords/
_CLOSES_ISSUE_RE = re.compile(
    r"\b(?:close|closes|closed|fix|fixes|fixed|resolve|resolves|resolved|for)\s#(\d+)\b", re.ASCII
)
# e.g. 'Fixes [#8952](https://github.com/electron/electron/issues/8952)'
_MARKDOWN_FIXES_RE = re.compile(r"Fixes \[#(\d+)\]\(https://github.com/(\w+)/(\w+)/issues/(\d+)\)", re.ASCII)
# https://www.conventionalcommits.org/en
_BREAKING_CHANGE_RE = re.compile(r"^\s*BREAKING CHANGE", re.MULTILINE | re.ASCII)
_REVERT_RE = re.compile(r"\bThis reverts commit ([a-f0-9]{40})\.", re.ASCII)
_SHORTHAND_PR_RE = re.compile(r"\b(\w+)/(\w+)#(\d+)\b", re.ASCII)
_URL_PR_RE = re.compile(r"https://github\.com/(\w+)/(\w+)/pull/(\d+)", re.ASCII)
_LEGACY_CHORE_RE = re.compile(r"\bchore\((\w+)\):", re.ASCII)
_LEGACY_FIX_RE = re.compile(r"\b(?:fix|fixes|fixed)\b", re.ASCII)
_LEGACY_DOC_RE = re.compile(r"\[(?:docs|doc)\]", re.ASCII)


@dataclass(frozen=True)
class PullRequestRef:
    owner: str
    repo: str
    number: int
    branch: str | None = None

    def to_dict(self) -> dict:
        data = {"owner": self.owner, "repo": self.repo, "number": self.number}
        if self.branch is not None:
            data["branch"] = self.branch
        return data


@dataclass(frozen=True)
class CommitRecord:
    """Structured view of a commit message.

    ``original_pr`` is pinned to the first pull request reference any rule
    assigns; later rules only move ``pr``.
    """

    original_subject: str
    subject: str
    body: str | None = None
    note: str | None = None
    type: str | None = None
    pr: PullRequestRef | None = None
    original_pr: PullRequestRef | None = None
    issue_number: int | None = None
    revert_hash: str | None = None

    def to_dict(self) -> dict:
        """Return the set fields only, with pull request refs as plain dicts."""
        data: dict = {"original_subject": self.original_subject, "subject": self.subject}
        for name in ("body", "note", "type", "issue_number", "revert_hash"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.pr is not None:
            data["pr"] = self.pr.to_dict()
        if self.original_pr is not None:
            data["original_pr"] = self.original_pr.to_dict()
        return data


@dataclass(frozen=True)
class _Context:
    message: str
    body: str
    owner: str
    repo: str
    follow_repos: frozenset


def set_pull_request(record: CommitRecord, owner: str, repo: str, number: int) -> CommitRecord:
    """Point ``record.pr`` at a new pull request, pinning ``original_pr`` on first use."""
    if not owner or not repo or not number:
        raise ValueError(f"Incomplete pull request reference: owner={owner!r} repo={repo!r} number={number!r}")

    original_pr = record.original_pr
    if original_pr is None:
        original_pr = record.pr

    pr = PullRequestRef(owner=owner, repo=repo, number=int(number))

    if original_pr is None:
        original_pr = pr

    logger.debug("Commit %r references %s/%s#%s", record.original_subject, owner, repo, number)
    return replace(record, pr=pr, original_pr=original_pr)


def _split(message: str) -> CommitRecord:
    subject, _, body = message.partition("\n")
    subject = subject.strip()
    return CommitRecord(original_subject=subject, subject=subject, body=body.strip() or None)


def _embedded_note(record: CommitRecord, ctx: _Context) -> CommitRecord:
    if record.body:
        note = find_note_in_commit_body(record.body)
        if note:
            return replace(record, note=note)
    return record


def _pr_suffix(record: CommitRecord, ctx: _Context) -> CommitRecord:
    match = _PR_SUFFIX_RE.match(record.subject)
    # GitHub numbers start at 1, so #0 is never a reference.
    if match and int(match.group(2)):
        record = set_pull_request(record, ctx.owner, ctx.repo, int(match.group(2)))
        record = replace(record, subject=match.group(1))
    return record


def _semantic_prefix(record: CommitRecord, ctx: _Context) -> CommitRecord:
    match = _SEMANTIC_RE.match(record.subject)
    if match:
        commit_type = match.group(1).lower()
        if commit_type in KNOWN_TYPES:
            record = replace(record, type=commit_type, subject=match.group(2))
    return record


def _merge_commit(record: CommitRecord, ctx: _Context) -> CommitRecord:
    match = _MERGE_RE.match(record.subject)
    if not match or not int(match.group(1)):
        return record
    record = set_pull_request(record, ctx.owner, ctx.repo, int(match.group(1)))
    pr = replace(record.pr, branch=match.group(2).strip())
    # A reference pinned by this very call is the same object; keep them in step.
    original_pr = pr if record.original_pr is record.pr else record.original_pr
    return replace(record, pr=pr, original_pr=original_pr)


def _backport_of(record: CommitRecord, ctx: _Context) -> CommitRecord:
    match = _BACKPORT_OF_RE.search(ctx.message)
    if match and int(match.group(1)):
        record = set_pull_request(record, ctx.owner, ctx.repo, int(match.group(1)))
    return record


def _closes_issue(record: CommitRecord, ctx: _Context) -> CommitRecord:
    match = _CLOSES_ISSUE_RE.search(record.subject)
    if match:
        record = replace(record, issue_number=int(match.group(1)), type=record.type or "fix")
    return record


def _markdown_fixes(record: CommitRecord, ctx: _Context) -> CommitRecord:
    if record.issue_number:
        return record
    match = _MARKDOWN_FIXES_RE.search(ctx.message)
    if not match:
        return record

    issue_number = int(match.group(1))
    pr, original_pr = record.pr, record.original_pr
    # The same number as the PR means the link was to the issue all along.
    if pr is not None and pr.number == issue_number:
        pr = None
    if original_pr is not None and original_pr.number == issue_number:
        original_pr = None
    return replace(
        record,
        issue_number=issue_number,
        pr=pr,
        original_pr=original_pr,
        type=record.type or "fix",
    )


def _breaking_change(record: CommitRecord, ctx: _Context) -> CommitRecord:
    if _BREAKING_CHANGE_RE.search(ctx.message):
        record = replace(record, type="breaking-change")
    return record


def _revert(record: CommitRecord, ctx: _Context) -> CommitRecord:
    match = _REVERT_RE.search(ctx.body)
    if match:
        record = replace(record, revert_hash=match.group(1))
    return record


def _cross_repo_backport(pattern: re.Pattern) -> Callable[[CommitRecord, _Context], CommitRecord]:
    """Build a rule for manual backports that name the original PR by owner/repo."""

    def rule(record: CommitRecord, ctx: _Context) -> CommitRecord:
        if "backport" not in ctx.message.lower():
            return record
        match = pattern.search(ctx.message)
        if match:
            owner, repo, number = match.groups()
            if int(number) and f"{owner}/{repo}" in ctx.follow_repos:
                record = set_pull_request(record, owner, repo, int(number))
        return record

    return rule


def _legacy_type(record: CommitRecord, ctx: _Context) -> CommitRecord:
    """Classify pre-semantic commits from loose markers in the message."""
    if record.type and record.type != "chore":
        return record

    message = ctx.message.lower()
    match = _LEGACY_CHORE_RE.search(message)
    if match:
        # example: 'Chore(docs): description'
        scope = match.group(1)
        return replace(record, type=scope if scope in KNOWN_TYPES else "chore")
    if _LEGACY_FIX_RE.search(message):
        # example: 'fix a bug'
        return replace(record, type="fix")
    if _LEGACY_DOC_RE.search(message):
        # example: '[docs] update README'
        return replace(record, type="doc")
    return record


_RULES: tuple[Callable[[CommitRecord, _Context], CommitRecord], ...] = (
    _embedded_note,
    _pr_suffix,
    _semantic_prefix,
    _merge_commit,
    _backport_of,
    _closes_issue,
    _markdown_fixes,
    _breaking_change,
    _revert,
    _cross_repo_backport(_SHORTHAND_PR_RE),
    _cross_repo_backport(_URL_PR_RE),
    _legacy_type,
)


def parse_commit(
    message: str,
    default_owner: str,
    default_repo: str,
    follow_repos: Iterable[str] = FOLLOW_REPOS,
) -> CommitRecord:
    """Parse a raw commit message into a CommitRecord.

    ``default_owner``/``default_repo`` are used for references that don't
    name a repository (``(#123)``, ``Backport of #123``, merge commits).
    ``follow_repos`` gates which ``owner/repo`` pairs a manual backport may
    point ``pr`` at.
    """
    record = _split(message)
    ctx = _Context(
        message=message,
        body=record.body or "",
        owner=default_owner,
        repo=default_repo,
        follow_repos=frozenset(follow_repos),
    )
    for rule in _RULES:
        record = rule(record, ctx)
    return replace(record, subject=record.subject.strip())
