"""Axis-aligned rectangles."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Rectangle covering [x, x + width] x [y, y + height]."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def intersects(self, other: "Rect") -> bool:
        """Overlap test on both axes, touching edges included."""
        return (
            self.x <= other.right
            and other.x <= self.right
            and self.y <= other.bottom
            and other.y <= self.bottom
        )
