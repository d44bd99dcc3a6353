"""scamclean: clean and classify reported scam phone numbers.

This package validates Vietnamese phone numbers, maps free-text report labels
onto a fixed scam taxonomy, and converts heterogeneous CSV and SQLite sources
into a uniform ``number,type,locker_type`` CSV.
"""
