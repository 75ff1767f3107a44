"""Internal constants shared across the package."""

from __future__ import annotations

from datetime import timedelta

SERVICE_NAME = "SafeDrive Backend"

SNAPSHOT_FILENAME = "prototype_data.json"
NOTIFICATION_LOG_FILENAME = "notifications.json"
USERS_FILENAME = "users.json"

DEFAULT_NOTIFICATION_LOG_LIMIT = 5000

# Strings devices and older documents send for "no value".
PLACEHOLDER_VALUES = frozenset({"", "--", "NaN", "nan", "null", "undefined"})

# ------------------------------------------------------------------
# Alert thresholds
# ------------------------------------------------------------------

BPM_LOW = 60
BPM_HIGH = 120
SPO2_LOW = 90

CAR_STATIONARY = "stationary"
CAR_ALERT = "alert"
GRIP_LOOSE = "loose"
EYES_CLOSED = "closed"

# Offset between notifications synthesized in the same ingestion event.
SYNTHESIS_STEP = timedelta(milliseconds=1)

# ------------------------------------------------------------------
# Issue texts
# ------------------------------------------------------------------

ISSUE_LOOSE_GRIP = "Loose Grip"
ISSUE_EYES_CLOSED = "Eyes Closed"
ISSUE_ABNORMAL_BPM = "Abnormal BPM: {value}"
ISSUE_LOW_SPO2 = "Low SpO2: {value}"
ISSUE_UNSAFE_DRIVING = "Unsafe Driving"
