# Tile constants centralized for modular imports

# Stage 1 (pattern synthesis)
OPEN = "."
CLOSED = "#"

# Stages 2-4 and final map
FLOOR = "."
WALL = "#"
POOL = "~"
BRIDGE = "="
DOOR = "+"

LIGHT_POOL = "pool"

__all__ = ["OPEN", "CLOSED", "FLOOR", "WALL", "POOL", "BRIDGE", "DOOR", "LIGHT_POOL"]
