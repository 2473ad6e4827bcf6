"""Public sewer generator interface.

Pure, in-memory level generation: (size, random stream) -> Sewer.
"""

from .config import SewerConfig, SewerSpec
from .errors import GenerationFailed, SewerConfigError, SewerError
from .features import SewerLight
from .pipeline import Sewer, generate_sewer
from .render import render_text
from .tiles import BRIDGE, DOOR, FLOOR, LIGHT_POOL, POOL, WALL

__all__ = [
    "Sewer",
    "SewerSpec",
    "SewerConfig",
    "SewerLight",
    "SewerError",
    "SewerConfigError",
    "GenerationFailed",
    "generate_sewer",
    "render_text",
    "FLOOR",
    "WALL",
    "POOL",
    "BRIDGE",
    "DOOR",
    "LIGHT_POOL",
]
