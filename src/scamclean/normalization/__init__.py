"""Phone number normalization for scamclean."""

from scamclean.normalization.phone import clean_number, format_number, is_valid

__all__ = ["clean_number", "format_number", "is_valid"]
