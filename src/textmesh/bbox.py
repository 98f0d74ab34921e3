import numpy as np
from datatrees import datatree, dtfield


@datatree
class BoundingBox:
    """Running 3D axis aligned bounding box. Starts empty (inf/-inf sentinels)."""

    min_point: np.ndarray = dtfield(
        default_factory=lambda: np.array([float("inf"), float("inf"), float("inf")])
    )
    max_point: np.ndarray = dtfield(
        default_factory=lambda: np.array([float("-inf"), float("-inf"), float("-inf")])
    )

    @property
    def is_empty(self) -> bool:
        """True until at least one point has been included."""
        return bool(np.any(self.min_point > self.max_point))

    @property
    def size(self) -> np.ndarray:
        """Get the size of the bounding box as a 3D vector."""
        if self.is_empty:
            return np.zeros(3)
        return self.max_point - self.min_point

    @property
    def center(self) -> np.ndarray:
        """Get the center of the bounding box."""
        if self.is_empty:
            return np.zeros(3)
        return self.min_point + self.size / 2.0

    def include(self, points: np.ndarray) -> "BoundingBox":
        """Grows the box in place to contain all the given points."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(points):
            self.min_point = np.minimum(self.min_point, points.min(axis=0))
            self.max_point = np.maximum(self.max_point, points.max(axis=0))
        return self

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Compute the union of this bounding box with another."""
        if self.is_empty:
            return other
        if other.is_empty:
            return self

        return BoundingBox(
            min_point=np.minimum(self.min_point, other.min_point),
            max_point=np.maximum(self.max_point, other.max_point),
        )

    def contains_point(self, point: np.ndarray, tolerance: float = 0.0) -> bool:
        """Check if a point is inside the bounding box."""
        if self.is_empty:
            return False
        point = np.asarray(point)
        return bool(
            np.all(point >= self.min_point - tolerance)
            and np.all(point <= self.max_point + tolerance)
        )

    def as_tuple(self) -> tuple[np.ndarray, np.ndarray]:
        return self.min_point.copy(), self.max_point.copy()
