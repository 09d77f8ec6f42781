"""Profile-name tokens embedded in favorite labels and history entries.

Entries look like "[PROFILE]: item" or "[PROFILE] item"; the token is the
trimmed text between the leading "[" and the first "]".
"""


def extract_profile_token(label: str) -> str | None:
    """Return the bracketed profile token of a label, or None if it has none.

    Example:
        >>> extract_profile_token("[sys1]: USER.DATA")
        'sys1'
        >>> extract_profile_token("plain") is None
        True
    """
    if not label.startswith("["):
        return None
    end = label.find("]")
    if end < 0:
        return None
    return label[1:end].strip()


def label_matches(label: str, profile_name: str) -> bool:
    """Check whether a label's bracketed token equals a profile name exactly."""
    return extract_profile_token(label) == profile_name
