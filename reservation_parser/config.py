"""
This module contains configuration settings for the reservation parser.
"""
import os
import logging

# Logging level
LOG_LEVEL = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

# Optional SQLite database for log records (unset disables database logging)
RECONCILE_LOG_DB_PATH = os.environ.get("RECONCILE_LOG_DB_PATH")

# Source tags attached to events by the monthly window
PRIMARY_SOURCE = os.environ.get("PRIMARY_SOURCE", "primary")
NEXT_SOURCE = os.environ.get("NEXT_SOURCE", "next")

# Candidate tier thresholds
STRONG_MATCH_THRESHOLD = float(os.environ.get("STRONG_MATCH_THRESHOLD", 0.7))
WEAK_MATCH_THRESHOLD = float(os.environ.get("WEAK_MATCH_THRESHOLD", 0.15))

# Sort candidates by score inside each tier before the greedy assignment
SORT_WITHIN_TIERS = os.environ.get("SORT_WITHIN_TIERS", "true").lower() in ("1", "true", "yes")
