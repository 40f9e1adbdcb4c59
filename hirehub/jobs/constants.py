"""Constants used by the jobs app.

Status transitions live here so the workflow module and the views read the
same table.
"""

from __future__ import annotations


DEFAULT_INTERVIEW_DURATION_MINUTES = 30

# Only these are offered as bulk actions on the HR candidate list.
BULK_STATUS_TARGETS = frozenset({"shortlisted", "rejected"})

# current status -> statuses it may move to
STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "submitted": frozenset({"shortlisted", "rejected", "interviewing"}),
    "shortlisted": frozenset({"interviewing", "rejected"}),
    # interviewing -> interviewing is a reschedule
    "interviewing": frozenset({"interviewing", "offered", "rejected"}),
    "offered": frozenset(),
    "rejected": frozenset(),
}

# Assessment link token length in bytes (hex-encoded to twice this).
ASSESSMENT_TOKEN_BYTES = 32
