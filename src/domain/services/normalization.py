"""Domain normalization helpers for rows read from the store."""

import unicodedata


def normalize_category(category: str | None) -> str:
    """Normalize expense/income category names for comparisons.

    Args:
        category: Raw category value from a repository.

    Returns:
        str: Lower-cased, accent-free, single-spaced category.
    """
    if not category:
        return ""
    text = unicodedata.normalize("NFKD", category)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return " ".join(text.lower().split())


def normalize_text(value: str | None) -> str:
    """Return a stripped string, empty when missing."""
    if value is None:
        return ""
    return str(value).strip()


def normalize_optional_text(value: str | None) -> str | None:
    """Return a stripped string, or None when missing or blank."""
    cleaned = normalize_text(value)
    return cleaned or None


def normalize_flag(value) -> bool:
    """Normalize boolean-like row values ("true", 1, None...)."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in {"1", "true", "t", "yes", "y", "si", "sí"}


__all__ = [
    "normalize_category",
    "normalize_text",
    "normalize_optional_text",
    "normalize_flag",
]
