"""Release-note extraction from PR/commit bodies and PR comment rendering.

A note is whatever follows a ``Notes:`` label, either on the same line or as
a bulleted block directly below it. The PR template ships an HTML comment
after the label, so comments are stripped before the note is used.
"""

from __future__ import annotations

import re

from prnotes_core.constants import NO_NOTES_BODY, NOTES_LEAD, OMIT_FROM_RELEASE_NOTES_KEYS

_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.ASCII)

# PR bodies: the label may sit on any line.
_PR_ONELINE_RE = re.compile(r"^notes: (.+?)$", re.IGNORECASE | re.MULTILINE | re.ASCII)
_PR_MULTILINE_RE = re.compile(r"^notes:((?:\r?\n\*.+$)+)", re.IGNORECASE | re.MULTILINE | re.ASCII)

# Commit bodies: the label must open the text or follow a newline.
_COMMIT_ONELINE_RE = re.compile(r"(?:\r?\n|^)notes: (.+?)(?:\r?\n|$)", re.IGNORECASE | re.ASCII)
_COMMIT_MULTILINE_RE = re.compile(r"\r?\nNotes:\r?\n((?:\*.+(?:\r?\n|$))+)", re.IGNORECASE | re.ASCII)


def _first_capture(text: str, oneline: re.Pattern, multiline: re.Pattern) -> str | None:
    for pattern in (oneline, multiline):
        match = pattern.search(text)
        if match and match.group(1):
            return match.group(1)
    return None


def _strip_comments(notes: str) -> str:
    return _HTML_COMMENT_RE.sub("", notes)


def extract_note(text: str) -> str | None:
    """Return the release note from a PR body, or None when there isn't one.

    The result is trimmed; a note that is empty once template comments are
    removed counts as missing.
    """
    notes = _first_capture(text or "", _PR_ONELINE_RE, _PR_MULTILINE_RE)
    if notes:
        notes = _strip_comments(notes).strip()
    return notes or None


def find_note_in_commit_body(text: str) -> str | None:
    """Return the release note embedded in a commit body.

    Unlike extract_note() the capture is not trimmed, so a note consisting
    only of a template comment comes back as an empty string.
    """
    notes = _first_capture(text or "", _COMMIT_ONELINE_RE, _COMMIT_MULTILINE_RE)
    if notes:
        notes = _strip_comments(notes)
    return notes


def format_note_comment(note: str | None) -> str:
    """Render the PR comment that shows which release note will be used."""
    body = NO_NOTES_BODY
    if note and note not in OMIT_FROM_RELEASE_NOTES_KEYS:
        lines = [line for line in note.split("\n") if line != ""]
        if lines:
            quoted = "\n".join(f"> {line}" for line in lines)
            body = f"{NOTES_LEAD}\n\n{quoted}"
    return body
