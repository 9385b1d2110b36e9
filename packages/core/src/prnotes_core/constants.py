NOTES_LEAD = "**Release Notes Persisted**"
NO_NOTES_BODY = "**No Release Notes**"

# Case-sensitive values a PR author can put after "Notes:" to opt out.
OMIT_FROM_RELEASE_NOTES_KEYS = frozenset(
    {
        "blank",
        "empty",
        "no notes",
        "no",
        "no-notes",
        "no_notes",
        "none",
        "nothing",
    }
)
