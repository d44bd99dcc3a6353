"""Command-line tools for scamclean."""
