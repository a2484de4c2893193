"""
Utils package
"""

from .normalization import TRANSFER_CATEGORY_NAME, is_transfer_category_name, normalize_name_token

__all__ = [
    "TRANSFER_CATEGORY_NAME",
    "is_transfer_category_name",
    "normalize_name_token",
]
