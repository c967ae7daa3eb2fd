"""Internal constants shared across the library."""

BASE_URL = "https://api.tfl.gov.uk"
USER_AGENT = "pytflbus/1.0 (+aiohttp)"

#: Stop types requested from ``/StopPoint`` radius searches.
BUS_STOP_TYPES = "NaptanPublicBusCoachTram"

# ------------------------------------------------------------------
# Map tiles / Web Mercator
# ------------------------------------------------------------------

TILE_SIZE = 256
OSM_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"

#: Mercator is undefined at the poles; the viewport never leaves this band.
MAX_LATITUDE = 85.0

#: Trafalgar Square area, used whenever nothing better is known.
LONDON_CENTER = (51.5074, -0.1278)

# ------------------------------------------------------------------
# Walking / distance display
# ------------------------------------------------------------------

#: Walking speed used by the nearby-stops listing (metres per second).
WALKING_SPEED_MPS = 1.4
#: Brisker walking pace used by the search dropdown (metres per minute).
BRISK_WALKING_M_PER_MIN = 84.0
METRES_TO_MILES = 0.000621371

# ------------------------------------------------------------------
# Arrival urgency thresholds (seconds)
# ------------------------------------------------------------------

DUE_THRESHOLD_S = 60
URGENT_THRESHOLD_S = 120
SOON_THRESHOLD_S = 300
