"""Source registry and readers for scam phone number reports."""
