"""Output markers git prints in place of structured errors.

git reports most outcomes only as human-readable text, so a few decisions
are made by looking for substrings in its output. All of those substrings live
here, each table evaluated top to bottom, case-insensitively.
"""

# Outcome kinds for failed commands
ERROR_NOT_A_REPO = "not_a_repository"
ERROR_UNSUPPORTED = "unsupported"

ERROR_MARKERS = [
    ("not a git repository", ERROR_NOT_A_REPO),
    ("is not a git command", ERROR_UNSUPPORTED),
    ("unknown option", ERROR_UNSUPPORTED),
    ("unknown switch", ERROR_UNSUPPORTED),
]

# Outcome kinds for `git stash pop`
STASH_POP_CONFLICT = "conflict"
STASH_POP_NO_STASH = "no_stash"
STASH_POP_ERROR = "error"

STASH_POP_MARKERS = [
    ("conflict", STASH_POP_CONFLICT),
    ("unmerged", STASH_POP_CONFLICT),
    ("no stash entries found", STASH_POP_NO_STASH),
    ("error:", STASH_POP_ERROR),
    ("fatal:", STASH_POP_ERROR),
]

# `git stash push` exits 0 whether or not it saved anything.
# English-only; other locales are reported as created when the list changed.
STASH_NOTHING_TO_SAVE = "no local changes"


def match_marker(text: str, table: list[tuple[str, str]]) -> str | None:
    """Return the outcome of the first marker found in text, or None."""
    lowered = (text or "").lower()
    for marker, outcome in table:
        if marker in lowered:
            return outcome
    return None

