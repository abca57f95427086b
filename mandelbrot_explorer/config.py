"""Defaults shared by the explorer session, the codec and the CLI."""

# The drawing surface is square; grids are RESOLUTION x RESOLUTION.
RESOLUTION = 1000

INITIAL_MIN_REAL = -2.0
INITIAL_MAX_REAL = 1.0
INITIAL_MIN_IMAGINARY = -1.5
INITIAL_MAX_IMAGINARY = 1.5
INITIAL_MAX_ITERATIONS = 100
DEFAULT_RADIUS_SQUARED = 4.0
# Escape counts are stored as int32.
MAX_ITERATIONS_LIMIT = 2**31 - 1

COLOR_MAX_VALUE = 255

# resolution x2, four bounds, iterations, radius, theme, magnification
HEADER_LINES = 10
SESSION_SUFFIX = ".txt"
