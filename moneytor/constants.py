from decimal import Decimal

WARNING_THRESHOLD = 85.0        # percent of a budget used
EXCEEDED_THRESHOLD = 100.0
MILESTONES = (25, 50, 75, 90, 100)
GOAL_DEADLINE_WINDOW_DAYS = 7
BEHIND_FALLBACK_DAYS = 30      # used when a goal's creation date is unknown
DAYS_PER_MONTH = Decimal("30.44")

# Target statuses
ON_TRACK = "on_track"
WARNING = "warning"
EXCEEDED = "exceeded"
COMPLETED = "completed"
TARGET_STATUSES = (ON_TRACK, WARNING, EXCEEDED, COMPLETED)

# Goal statuses
ACHIEVED = "achieved"
OVERDUE = "overdue"
BEHIND = "behind"
GOAL_STATUSES = (ON_TRACK, BEHIND, ACHIEVED, OVERDUE)

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"

CONFIG_ENV_VAR = "MONEYTOR_CONFIG"
