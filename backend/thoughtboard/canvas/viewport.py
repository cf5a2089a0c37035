"""
Pan/zoom state of the board canvas.

A point on screen ``s`` and a point in world space ``w`` are related by
``s = w * k + (x, y)``. Cards are stored in world coordinates, so every
pointer position goes through :meth:`Viewport.screen_to_world` first.
"""
from dataclasses import dataclass

MIN_SCALE = 0.1
MAX_SCALE = 5.0
ZOOM_STEP = 1.2
# One wheel notch (deltaY ~ 100) scales by 1.1 ** 0.5
WHEEL_BASE = 1.1
WHEEL_DIVISOR = 200.0


def clamp_scale(k: float) -> float:
    return min(max(MIN_SCALE, k), MAX_SCALE)


@dataclass(frozen=True)
class Transform:
    x: float = 0.0
    y: float = 0.0
    k: float = 1.0


IDENTITY = Transform()


class Viewport:
    def __init__(self, transform: Transform = IDENTITY):
        self.transform = transform
        self._pan_origin: tuple[float, float] | None = None

    @property
    def is_panning(self) -> bool:
        return self._pan_origin is not None

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        t = self.transform
        return (sx - t.x) / t.k, (sy - t.y) / t.k

    def world_to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        t = self.transform
        return wx * t.k + t.x, wy * t.k + t.y

    def zoom_at(self, ax: float, ay: float, delta_y: float) -> Transform:
        """
        Wheel zoom anchored at screen point (ax, ay).

        Negative ``delta_y`` zooms in. The world point under the anchor
        stays under the anchor.
        """
        t = self.transform
        factor = WHEEL_BASE ** (-delta_y / WHEEL_DIVISOR)
        new_k = clamp_scale(t.k * factor)
        ratio = new_k / t.k
        self.transform = Transform(
            x=ax - (ax - t.x) * ratio,
            y=ay - (ay - t.y) * ratio,
            k=new_k,
        )
        return self.transform

    def begin_pan(self, sx: float, sy: float) -> None:
        t = self.transform
        self._pan_origin = (sx - t.x, sy - t.y)

    def pan_to(self, sx: float, sy: float) -> Transform:
        """Follow the pointer 1:1; ignored unless a pan is in progress."""
        if self._pan_origin is None:
            return self.transform
        ox, oy = self._pan_origin
        self.transform = Transform(x=sx - ox, y=sy - oy, k=self.transform.k)
        return self.transform

    def end_pan(self) -> None:
        self._pan_origin = None

    def reset(self) -> Transform:
        self._pan_origin = None
        self.transform = IDENTITY
        return self.transform

    def zoom_in(self) -> Transform:
        # Button zoom scales about the origin; translation is left alone
        t = self.transform
        self.transform = Transform(x=t.x, y=t.y, k=clamp_scale(t.k * ZOOM_STEP))
        return self.transform

    def zoom_out(self) -> Transform:
        t = self.transform
        self.transform = Transform(x=t.x, y=t.y, k=clamp_scale(t.k / ZOOM_STEP))
        return self.transform
