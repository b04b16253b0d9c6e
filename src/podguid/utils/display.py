"""Display helpers shared by the CLI and logging."""

MASK_VISIBLE_CHARS = 4


def mask_credential(credential: str | None) -> str:
    """Mask an API key for display.

    Only the first few characters are kept, followed by an ellipsis.

    Args:
        credential: API key to mask (may be None)

    Returns:
        Masked form, e.g. ``"abcd…"``, or ``"—"`` when there is no key

    Example:
        >>> mask_credential("abcdef123456")
        'abcd…'
    """
    if not credential:
        return "—"
    return credential[:MASK_VISIBLE_CHARS] + "…"
