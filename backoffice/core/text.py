from typing import Optional


def fold_text(value) -> Optional[str]:
    """Unicode case-fold used for every case-insensitive comparison.

    SQLite connections register this as ``lower`` so the database and the
    in-memory list agree on non-ASCII text.
    """
    if value is None:
        return None
    return str(value).casefold()


__all__ = ["fold_text"]
