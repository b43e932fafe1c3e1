"""Fixed constants shared by the codecs and the analytics engine."""

from __future__ import annotations

from pathlib import Path

APP_DIR_NAME = ".zwobuilder"
DEFAULT_STORE_FILENAME = "store.json"

DEFAULT_FTP_WATTS = 200

# Canonical XML
ZWO_ROOT_TAG = "workout_file"
ZWO_SPORT_TYPE = "bike"
ZWO_EXTENSION = ".zwo"

# Legacy text formats
ERG_EXTENSION = ".erg"
MRC_EXTENSION = ".mrc"

# Share link query parameters
URL_FORMAT_PARAM = "n"
URL_PAYLOAD_PARAM = "w"
URL_FORMAT_TAG = "zwb1"

# Materializer: free ride carries no prescribed load
FREE_RIDE_POWER = 0.0

# Experience points per minute: base + intensity * min(power fraction, cap)
XP_BASE_PER_MINUTE = 6.0
XP_INTENSITY_PER_MINUTE = 6.0
XP_INTENSITY_CAP = 2.0

# Fuel estimates
KCAL_PER_KJ = 1.0 / 4.184
GROSS_EFFICIENCY = 0.24
CARB_GRAMS_PER_KCAL = 0.15
WATER_ML_PER_KCAL = 1.0

# Candidate durations (seconds) for the best average power curve
POWER_CURVE_DURATIONS: tuple[int, ...] = (
    1, 2, 3, 5, 10, 15, 20, 30, 45,
    60, 90, 120, 180, 240, 300, 360, 480, 600, 720, 900,
    1200, 1500, 1800, 2400, 2700, 3000, 3600,
    4500, 5400, 7200, 9000, 10800, 14400,
)


def default_store_path() -> Path:
    return Path.home() / APP_DIR_NAME / DEFAULT_STORE_FILENAME
