"""
Card geometry in world coordinates: placement, drag, resize, connection
anchors and the position of a grown child card.
"""
import random
from typing import Iterable, NamedTuple, Protocol

from thoughtboard.canvas.viewport import Viewport

CARD_WIDTH = 250.0
CARD_HEIGHT = 150.0
MIN_CARD_WIDTH = 220.0
MIN_CARD_HEIGHT = 100.0
GROW_OFFSET_X = 350.0
GROW_SPREAD_Y = 100.0


class Positioned(Protocol):
    id: object
    x: float
    y: float


class Linked(Protocol):
    id: object
    from_id: object
    to_id: object


class Segment(NamedTuple):
    connection_id: object
    start: tuple[float, float]
    end: tuple[float, float]


def center_placement(viewport: Viewport, screen_width: float, screen_height: float) -> tuple[float, float]:
    """Top-left world position that centres a default card in the visible area."""
    wx, wy = viewport.screen_to_world(screen_width / 2, screen_height / 2)
    return wx - CARD_WIDTH / 2, wy - CARD_HEIGHT / 2


def drag_position(x: float, y: float, dx: float, dy: float, k: float) -> tuple[float, float]:
    """Committed card position after a drag of (dx, dy) screen pixels at scale k."""
    return x + dx / k, y + dy / k


def resize_dimensions(
    start_width: float, start_height: float, dx: float, dy: float, k: float
) -> tuple[float, float]:
    width = max(MIN_CARD_WIDTH, start_width + dx / k)
    height = max(MIN_CARD_HEIGHT, start_height + dy / k)
    return width, height


def committed_size(width: float, height: float) -> tuple[int, int]:
    """Sizes are stored as whole pixels once the resize gesture ends."""
    return round(width), round(height)


def card_center(x: float, y: float) -> tuple[float, float]:
    """Anchor point of a default-size card, used as a connection endpoint."""
    return x + CARD_WIDTH / 2, y + CARD_HEIGHT / 2


def connection_segments(thoughts: Iterable[Positioned], connections: Iterable[Linked]) -> list[Segment]:
    """Line segments for every connection whose endpoints are both present."""
    by_id = {thought.id: thought for thought in thoughts}
    segments = []
    for connection in connections:
        source = by_id.get(connection.from_id)
        target = by_id.get(connection.to_id)
        if source is None or target is None:
            continue
        segments.append(
            Segment(connection.id, card_center(source.x, source.y), card_center(target.x, target.y))
        )
    return segments


def grow_position(x: float, y: float, rng: random.Random | None = None) -> tuple[float, float]:
    """Where a child card grown from a parent at (x, y) is placed."""
    rng = rng or random
    return x + GROW_OFFSET_X, y + rng.uniform(-GROW_SPREAD_Y, GROW_SPREAD_Y)
