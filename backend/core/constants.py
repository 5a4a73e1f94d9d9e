"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric constant should import it
from here instead of hardcoding.
"""

# ── Notifications ───────────────────────────────────────────────────
# ``GET /api/notifications/`` returns at most this many rows, newest first.
NOTIFICATION_LIST_LIMIT: int = 50

# ── Message threads ─────────────────────────────────────────────────
# A new timestamp header is shown above a message when it follows the
# previous one by more than this many milliseconds (5 minutes).
MESSAGE_HEADER_GAP_MS: int = 300_000
