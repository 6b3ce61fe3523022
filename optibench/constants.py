"""Application-wide constants.

Grid coordinates are real-valued grid units; physical lengths are mm
(one grid unit = ``cell_size`` mm); wavelengths are nm.
"""

APP_NAME = "Optical Bench"
APP_VERSION = "0.1.0"
APP_ORGANIZATION = "Optibench"

# Canvas defaults
DEFAULT_GRID_WIDTH = 40
DEFAULT_GRID_HEIGHT = 25
DEFAULT_CELL_SIZE = 30.0  # mm per grid unit

# Source defaults
DEFAULT_LASER_POWER = 1.0
DEFAULT_WAVELENGTH_NM = 632.8  # HeNe

# Interaction defaults (fractions 0-1)
DEFAULT_MIRROR_REFLECTIVITY = 1.0
DEFAULT_SPLITTER_REFLECTIVITY = 0.5
DEFAULT_SPLITTER_TRANSMITIVITY = 0.5
LENS_TRANSMISSION = 0.95

# Ray tracing
MAX_BOUNCES = 30
FORWARD_DEAD_ZONE = 0.1  # grid units
HIT_RADIUS = 0.8  # grid units
INTENSITY_FLOOR = 0.01
SPLIT_INTENSITY_FLOOR = 0.01
MAX_BRANCHES = 1000
DIRECTION_KEY_DECIMALS = 6

# Analysis
POSITION_MATCH_TOLERANCE = 0.5  # grid units
DETECTOR_CONVERGENCE_TOLERANCE = 1.0  # grid units
CONSTRUCTIVE_LOW_FRACTION = 0.25
CONSTRUCTIVE_HIGH_FRACTION = 0.75
