"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_GEOFENCE_RADIUS = 100
MIN_GEOFENCE_RADIUS = 0
MAX_GEOFENCE_RADIUS = 10_000

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_ADMIN_LIMIT = 100
MAX_LIST_LIMIT = 500
