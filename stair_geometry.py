"""Geometry helpers shared by flights and landings.
Walking lines, flight side planes, point projections and tolerant point dedup.
All vector math is done with build123d's Vector.
"""
import math
from dataclasses import dataclass
from build123d import Vector

from stair_errors import ParameterOutOfRange

WORLD_UP = Vector(0, 0, 1)

# Two planar points are the same vertex when both coordinates agree within this.
TOLERANCE = 1e-5

# Below this angle (degrees) two flight directions count as parallel
ANGLE_TOLERANCE = 1e-6


@dataclass(frozen=True)
class WalkingLine:
    """Directed straight segment traced by the feet while ascending."""
    start: Vector
    end: Vector

    def __post_init__(self):
        # Accept plain tuples
        object.__setattr__(self, "start", Vector(self.start))
        object.__setattr__(self, "end", Vector(self.end))
        if self.length() <= TOLERANCE:
            raise ParameterOutOfRange("walking_line", self.length(),
                                      f"walking_line has zero length: {self.length()!r}")

    def length(self) -> float:
        return (self.end - self.start).length

    def direction(self) -> Vector:
        return (self.end - self.start).normalized()

    def offset(self, vector) -> "WalkingLine":
        v = Vector(vector)
        return WalkingLine(self.start + v, self.end + v)


@dataclass(frozen=True)
class SidePlane:
    """Vertical plane bounding one side of a flight."""
    origin: Vector
    normal: Vector


def horizontal(v: Vector) -> Vector:
    """Drop the Z component (landing work happens in plan)."""
    return Vector(v.X, v.Y, 0)


def left_of(direction: Vector) -> Vector:
    """Unit vector pointing to the left of a walking direction, in plan."""
    return WORLD_UP.cross(horizontal(direction)).normalized()


def side_planes(line: WalkingLine, width: float):
    """Left and right side planes of a flight of the given width."""
    left = left_of(line.direction())
    start = horizontal(line.start)
    half = left * (width / 2)
    return SidePlane(start + half, left), SidePlane(start - half, left)


def angle_between(a: Vector, b: Vector) -> float:
    """Unsigned angle between two plan directions, in degrees."""
    a = horizontal(a).normalized()
    b = horizontal(b).normalized()
    cos_t = max(-1.0, min(1.0, a.dot(b)))
    return math.degrees(math.acos(cos_t))


def project_point(point: Vector, plane: SidePlane) -> Vector:
    """Orthogonal projection of a point onto a plane."""
    dist = (point - plane.origin).dot(plane.normal)
    return point - plane.normal * dist


def project_along(point: Vector, direction: Vector, plane: SidePlane):
    """Project a point onto a plane along a direction.
    Returns None when the direction is parallel to the plane.
    """
    denom = direction.dot(plane.normal)
    if abs(denom) < TOLERANCE:
        return None
    t = (plane.origin - point).dot(plane.normal) / denom
    return point + direction * t


def points_equal(a: Vector, b: Vector, tolerance: float = TOLERANCE) -> bool:
    """Planar identity: X and Y both within tolerance."""
    return abs(a.X - b.X) <= tolerance and abs(a.Y - b.Y) <= tolerance


def dedupe_points(points, tolerance: float = TOLERANCE):
    """Drop every point that matches an earlier one, keeping order."""
    kept = []
    for p in points:
        if not any(points_equal(p, k, tolerance) for k in kept):
            kept.append(p)
    return kept


def count_fitting(length: float, step: float) -> int:
    """How many whole steps fit in a length.
    A relative slack keeps n * step / step from flooring to n - 1.
    """
    return int(math.floor(length / step + 1e-9 * max(1.0, length / step)))
