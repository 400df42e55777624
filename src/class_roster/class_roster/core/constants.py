"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WINDOW_DAYS = 30
DEFAULT_TEMPLATE_EDIT_POLICY = "frozen"
PROJECTION_CACHE_SIZE = 64
