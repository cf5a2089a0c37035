from thoughtboard.canvas.viewport import Transform, Viewport, IDENTITY, MIN_SCALE, MAX_SCALE, ZOOM_STEP
from thoughtboard.canvas.geometry import (
    CARD_WIDTH,
    CARD_HEIGHT,
    MIN_CARD_WIDTH,
    MIN_CARD_HEIGHT,
    Segment,
    center_placement,
    drag_position,
    resize_dimensions,
    committed_size,
    card_center,
    connection_segments,
    grow_position,
)

__all__ = [
    "Transform", "Viewport", "IDENTITY", "MIN_SCALE", "MAX_SCALE", "ZOOM_STEP",
    "CARD_WIDTH", "CARD_HEIGHT", "MIN_CARD_WIDTH", "MIN_CARD_HEIGHT", "Segment",
    "center_placement", "drag_position", "resize_dimensions", "committed_size",
    "card_center", "connection_segments", "grow_position",
]
