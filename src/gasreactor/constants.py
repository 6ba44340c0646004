"""Default constants for the particle container."""

from __future__ import annotations

CONTAINER_WIDTH = 800.0
CONTAINER_HEIGHT = 800.0

PARTICLE_RADIUS = 10.0
COOLDOWN_TICKS = 30
# Between 0 (no variation) and 1 (100% variation) of the nominal speed
MAX_SPEED_VARIATION = 0.5

SPECIES_COLORS = {
    "A": "blue",
    "B": "red",
    "C": "orange",
}
FALLBACK_COLOR = "black"
DEFAULT_SPECIES = "A"

FPS = 60
# Nominal particle speed (distance per tick)
CONTAINER_TEMPERATURE = 2.0
