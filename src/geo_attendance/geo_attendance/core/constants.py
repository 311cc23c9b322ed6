"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
