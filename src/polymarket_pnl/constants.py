"""Centralized policy constants for P&L accounting and summary statistics.

Policy-encoding literals live here so the engine, the aggregator and the CLI
agree on the same thresholds.
"""

from __future__ import annotations

# =============================================================================
# Lot Matching
# =============================================================================

# Quantities at or below this are treated as zero.
#
# Used by:
# - portfolio/_fifo.py: lot draw-down and open-quantity flatness checks
#
# Share sizes arrive as floats; repeated partial consumption can leave dust
# like 1e-14 that would otherwise keep a lot (and the position) open forever.
QUANTITY_EPSILON: float = 1e-9

# Outcome substrings that mark a position as "Long YES".
#
# Used by:
# - portfolio/_fifo.py: side_label()
YES_OUTCOME_MARKERS: tuple[str, ...] = ("yes", "true")

# =============================================================================
# Summary Statistics
# =============================================================================

# Minimum open-to-close gap (seconds) for a position to count toward the
# average holding time.
#
# Used by:
# - portfolio/summary.py: summarize_positions()
#
# Gaps of one minute or less mean the true open time was unknown (for example
# the closed-positions feed reports only a close time). The gap must be
# strictly greater than this value.
HOLDING_TIME_MIN_GAP_SECONDS: float = 60.0

SECONDS_PER_DAY: float = 60 * 60 * 24

# Display label limits for category/tag names.
#
# Used by:
# - portfolio/summary.py: truncate_label()
#
# Labels longer than LABEL_MAX_LENGTH are cut to LABEL_TRUNCATED_LENGTH
# characters followed by LABEL_ELLIPSIS.
LABEL_MAX_LENGTH: int = 20
LABEL_TRUNCATED_LENGTH: int = 17
LABEL_ELLIPSIS: str = "..."

# Number of tags reported in PositionSummary.top_tags.
TOP_TAGS_LIMIT: int = 3

# Sentinel shown when no category/tag is available.
EMPTY_LABEL: str = "-"

# =============================================================================
# Trade Feed Normalization
# =============================================================================

# Placeholders for raw trades missing identity fields.
#
# Used by:
# - feed/normalize.py: normalize_trade()
UNKNOWN_CONDITION_ID: str = "unknown"
DEFAULT_OUTCOME: str = "0"
