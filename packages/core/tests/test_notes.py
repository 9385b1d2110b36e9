"""Tests for release-note extraction and PR comment formatting."""

import pytest

from prnotes_core.constants import NO_NOTES_BODY, NOTES_LEAD, OMIT_FROM_RELEASE_NOTES_KEYS
from prnotes_core.notes import extract_note, find_note_in_commit_body, format_note_comment

PR_BODY_WITH_NOTE = """#### Description of Change

Does a thing.

#### Checklist
<!-- Remove items that do not apply. For completed items, change [ ] to [x]. -->

- [ ] PR description included and stakeholders cc'd
- [ ] `npm test` passes

#### Release Notes

Notes: Added a memory leak.
"""

PR_BODY_WITH_EMBEDDED_COMMENT = """Backport of #16875

See that PR for details.


Notes: <!-- Please add a one-line description for app developers to read in the release notes, \
or `no-notes` if no notes relevant to app developers. -->no-notes
"""

PR_BODY_WITH_BULLETS = """Does several things.

Notes:
* Fixed a crash when closing windows.
* Added a `foo` option.

Thanks!
"""


class TestExtractNote:
    def test_finds_one_line_note(self):
        assert extract_note(PR_BODY_WITH_NOTE) == "Added a memory leak."

    def test_strips_comments(self):
        assert extract_note(PR_BODY_WITH_EMBEDDED_COMMENT) == "no-notes"

    def test_label_is_case_insensitive(self):
        assert extract_note("NOTES: Loud note.") == "Loud note."

    def test_finds_bulleted_note(self):
        assert extract_note(PR_BODY_WITH_BULLETS) == "* Fixed a crash when closing windows.\n* Added a `foo` option."

    def test_one_line_note_wins_over_bullets(self):
        body = "Notes:\n* bullet note\n\nnotes: one-liner"
        assert extract_note(body) == "one-liner"

    def test_comment_only_note_is_none(self):
        assert extract_note("Notes: <!-- fill me in -->") is None

    def test_no_label_is_none(self):
        assert extract_note("Just a description.") is None

    def test_empty_body_is_none(self):
        assert extract_note("") is None

    def test_strips_every_comment(self):
        assert extract_note("Notes: <!-- a -->Fixed <!-- b -->it.") == "Fixed it."


class TestFindNoteInCommitBody:
    def test_finds_note(self):
        assert find_note_in_commit_body("Some text.\n\nNotes: Added a thing.") == "Added a thing."

    def test_finds_note_at_start(self):
        assert find_note_in_commit_body("Notes: Added a thing.\nMore text.") == "Added a thing."

    def test_comment_only_note_is_not_trimmed_away(self):
        assert find_note_in_commit_body("Notes: <!-- fill me in --> ") == " "

    def test_comment_only_note_is_empty(self):
        assert find_note_in_commit_body("Notes: <!-- fill me in -->") == ""

    def test_finds_bulleted_note(self):
        body = "Some text.\nNotes:\n* one\n* two\n"
        assert find_note_in_commit_body(body) == "* one\n* two\n"

    def test_no_label_is_none(self):
        assert find_note_in_commit_body("Nothing here.") is None


class TestFormatNoteComment:
    def test_knows_when_to_show_notes(self):
        comment = format_note_comment("some note")
        assert NOTES_LEAD in comment
        assert "some note" in comment

    @pytest.mark.parametrize("key", sorted(OMIT_FROM_RELEASE_NOTES_KEYS))
    def test_knows_when_to_show_no_notes(self, key):
        assert format_note_comment(key) == NO_NOTES_BODY

    def test_omission_keys_are_case_sensitive(self):
        assert format_note_comment("None") != NO_NOTES_BODY

    def test_none_shows_no_notes(self):
        assert format_note_comment(None) == NO_NOTES_BODY

    def test_quotes_a_single_line_note(self):
        assert format_note_comment("some note") == f"{NOTES_LEAD}\n\n> some note"

    def test_quotes_a_multiline_note(self):
        comment = format_note_comment("line one\nline two")
        assert NOTES_LEAD in comment
        assert "> line one\n> line two" in comment

    def test_drops_empty_lines(self):
        assert format_note_comment("one\n\ntwo") == f"{NOTES_LEAD}\n\n> one\n> two"

    def test_only_newlines_shows_no_notes(self):
        assert format_note_comment("\n\n") == NO_NOTES_BODY

    def test_extracted_no_notes_renders_no_notes_body(self):
        assert format_note_comment(extract_note(PR_BODY_WITH_EMBEDDED_COMMENT)) == NO_NOTES_BODY

    def test_is_deterministic(self):
        first = format_note_comment(extract_note(PR_BODY_WITH_NOTE))
        assert format_note_comment(extract_note(PR_BODY_WITH_NOTE)) == first
