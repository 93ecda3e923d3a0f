# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework
and the defaults used when config.json leaves a tunable out.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 800  # Pixels
HEIGHT = 600  # Pixels

# Framerate of the drawing loop. Physics ticks run on their own schedule.
FPS = 60  # Frames per second

# Colors (RGB)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 0)
ORANGE = (255, 200, 0)
YELLOW = (255, 255, 0)
BLUE = (0, 0, 255)
PANEL_COLOR = (40, 40, 40)

# Window Title
TITLE = "Simple Space"

# Density Bands for Visualization
# Each entry is (upper density bound, color). A body takes the first band whose
# bound is >= its density; anything denser than the last bound is BLUE.
DENSITY_BANDS = [
    (0.03, RED),
    (0.1,  ORANGE),
    (0.5,  YELLOW),
    (1.0,  WHITE),
]
DENSEST_COLOR = BLUE

# Aiming graphics
AIM_DIAMETER = 100  # Pixels

# Settings panel
PANEL_WIDTH = 200  # Pixels
PANEL_FONT_SIZE = 20

# Physics defaults
DEFAULT_GRAVITY_CONSTANT = 5e-3
DEFAULT_MAX_BODIES = 10
DEFAULT_TICK_INTERVAL_MS = 1  # Milliseconds between physics ticks

# Spawn defaults (slider-style ranges, 0 is raised to 1 when selected)
DEFAULT_RADIUS_MIN = 0
DEFAULT_RADIUS_MAX = 20
DEFAULT_RADIUS = 5
DEFAULT_MASS_MIN = 0
DEFAULT_MASS_MAX = 100
DEFAULT_MASS = 20
