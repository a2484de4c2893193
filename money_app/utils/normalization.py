"""
Name normalization helpers.

Category names are typed by hand, so matching on them (for example to spot the
transfer category) goes through the same normalization everywhere.
"""

import re
import unicodedata


TRANSFER_CATEGORY_NAME = "Transfer"
_TRANSFER_TOKENS = frozenset({"transfer", "transferin", "transferout"})


def normalize_name_token(value: str | None) -> str:
    """
    Normalize a free-text name into a comparison token.

    - NFKC normalization (full-width forms fold to ASCII)
    - casefold
    - whitespace and punctuation removed

    Example:
        >>> normalize_name_token("Transfer Out")
        'transferout'
        >>> normalize_name_token("  Ｔｒａｎｓｆｅｒ ")
        'transfer'
    """
    if not value:
        return ""

    normalized = unicodedata.normalize("NFKC", value)
    normalized = normalized.casefold()
    normalized = re.sub(r"\W+", "", normalized, flags=re.UNICODE)

    return normalized


def is_transfer_category_name(name: str | None) -> bool:
    """
    True for the names used by the wallet-to-wallet transfer category.

    Example:
        >>> is_transfer_category_name("transfer in")
        True
        >>> is_transfer_category_name("Transport")
        False
    """
    return normalize_name_token(name) in _TRANSFER_TOKENS
