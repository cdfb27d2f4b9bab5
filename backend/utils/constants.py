"""Shared constants and defaults for journal entries and analytics."""

ENTRY_TYPES = ["trade", "link"]
DIRECTIONS = ["long", "short"]
OUTCOMES = ["win", "loss", "be", "pending"]

FILTER_MODES = ["all", "win", "loss", "favorites"]
SORT_MODES = ["newest", "oldest", "pnl-high", "pnl-low", "pair-az"]

# Validation limits
PAIR_MIN_LENGTH = 6
PAIR_MAX_LENGTH = 10
MAX_NOTES_LENGTH = 5000

# Analytics labels
START_LABEL = "Start"
UNKNOWN_PAIR = "UNKNOWN"

# Date groups, in display order
DATE_GROUPS = ["TODAY", "YESTERDAY", "THIS_WEEK", "OLDER"]
