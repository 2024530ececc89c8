"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

# Organizational category codes a parade may include.
CATEGORIES = ("A", "B", "C")

# Divisions within every category.
DIVISIONS = ("SD", "SW")

# Canonical display order for the rank summary.
RANK_ORDER = ("SUO", "JUO", "SGT", "CPL", "LCPL", "CDT")

DEFAULT_PARADE_TYPE = "Theory"

PENDING_NOTICE_ROLE = "senior"

REPORT_PREVIEW_CHARS = 100
