"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 500
DEFAULT_LATE_AFTER = "09:00"
DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_FACE_MATCH_THRESHOLD = 0.56
DEFAULT_ACTIVITY_DAYS = 7
DEFAULT_SUBTASK_GATE_ROLES = ("employee", "unit_lead")

REPORT_SEPARATOR = "\n\n--- REPORT ---\n"
SUGGESTION_REPLY_PREFIX = "RE: Suggestion - "

# Lag applied to the serverTime polling cursor; covers writes committed after a poll began.
POLL_OVERLAP_MS = 5000
