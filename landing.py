"""Landing synthesis between two stair flights.

The landing is a horizontal slab whose top is flush with the head of the
first flight. Its plan outline has to cover the top of the first flight and
the foot of the second, stay simple and planar, and work for any turn
between 90 and 180 degrees.

Two outlines are available:

- PROJECTION (default): flight 1's top corners are projected onto flight 2's
  side planes. Along flight 1's direction for turns up to 90 degrees, which
  gives a rectangle. Orthogonally for wider turns, where the longer side is
  pushed out by one flight width so the outline still covers both flights.
- HULL: the convex hull of the eight corners of one flight-width square
  beyond each flight end.
"""
import math
from enum import Enum
from build123d import Vector
from shapely.geometry import MultiPoint, Polygon as PlanPolygon

from floor_slab import Floor
from stair_errors import UnsupportedLandingGeometry
from stair_geometry import (
    ANGLE_TOLERANCE, TOLERANCE, angle_between, dedupe_points, horizontal,
    left_of, project_along, project_point, side_planes,
)


# Smallest turn (degrees) the directed projection accepts
MIN_DIRECTED_TURN = 0.01


class LandingMethod(Enum):
    PROJECTION = "projection"
    HULL = "hull"


def _flight_frame(flight):
    """Plan direction, left unit vector, start and end of a flight (unplaced)."""
    line = flight.walking_line
    d = horizontal(line.direction()).normalized()
    top = flight.base_plane.from_local_coords(
        (flight.profile.top_point[0], flight.profile.top_point[1], 0))
    return d, left_of(d), horizontal(line.start), horizontal(top)


def _check_turn(flight1, flight2):
    theta = angle_between(flight1.walking_line.direction(), flight2.walking_line.direction())
    if theta <= ANGLE_TOLERANCE:
        raise UnsupportedLandingGeometry(
            "flights are collinear and face the same way; no landing can be built")
    return theta


def projection_outline(flight1, flight2):
    """Landing outline by projecting flight 1's top corners onto flight 2's sides."""
    theta = _check_turn(flight1, flight2)
    d1, left1, _, end1 = _flight_frame(flight1)
    d2, left2, start2, _ = _flight_frame(flight2)

    half1 = left1 * (flight1.flight_width / 2)
    half2 = left2 * (flight2.flight_width / 2)
    top_left, top_right = end1 + half1, end1 - half1
    bottom_left, bottom_right = start2 + half2, start2 - half2

    left_plane2, right_plane2 = side_planes(flight2.walking_line, flight2.flight_width)

    if theta <= 90.0 + ANGLE_TOLERANCE:
        # Near-parallel sides would push the projections arbitrarily far
        if abs(d1.dot(left2)) < math.sin(math.radians(MIN_DIRECTED_TURN)):
            raise UnsupportedLandingGeometry(
                f"turn of {theta:.6f} deg is too small to build a landing")
        mid_left = project_along(top_left, d1, left_plane2)
        mid_right = project_along(top_right, d1, right_plane2)
        if mid_left is None or mid_right is None:
            raise UnsupportedLandingGeometry(
                f"flight 1 runs parallel to flight 2's sides (turn {theta:.3f} deg)")
        mids_left, mids_right = [mid_left], [mid_right]
    else:
        mids_left = [project_point(top_left, left_plane2)]
        mids_right = [project_point(top_right, right_plane2)]

        left_plane1, right_plane1 = side_planes(flight1.walking_line, flight1.flight_width)
        reach = d2 * -flight2.flight_width
        if (top_left - bottom_left).length <= (top_right - bottom_right).length:
            extended = bottom_right + reach
            mids_right = [project_point(extended, right_plane1), extended]
        else:
            extended = bottom_left + reach
            mids_left = [extended, project_point(extended, left_plane1)]

    base = d2 * flight2.base_thickness
    outline = ([top_right] + mids_right + [bottom_right, bottom_right + base,
               bottom_left + base, bottom_left] + mids_left + [top_left])
    return [horizontal(p) for p in outline]


def hull_outline(flight1, flight2):
    """Landing outline as the convex hull of both flights' end squares."""
    _check_turn(flight1, flight2)
    d1, left1, _, end1 = _flight_frame(flight1)
    d2, left2, start2, _ = _flight_frame(flight2)

    half1 = left1 * (flight1.flight_width / 2)
    half2 = left2 * (flight2.flight_width / 2)
    reach1 = d1 * flight1.flight_width
    reach2 = d2 * -flight2.flight_width
    candidates = [
        end1 + half1, end1 - half1, end1 + half1 + reach1, end1 - half1 + reach1,
        start2 + half2, start2 - half2, start2 + half2 + reach2, start2 - half2 + reach2,
    ]
    hull = MultiPoint([(p.X, p.Y) for p in candidates]).convex_hull
    if hull.geom_type != "Polygon":
        raise UnsupportedLandingGeometry(f"landing hull is degenerate ({hull.geom_type})")
    return [Vector(x, y, 0) for x, y in list(hull.exterior.coords)[:-1]]


def landing_outline(flight1, flight2, method=LandingMethod.PROJECTION):
    """Deduplicated, counter-clockwise plan outline of the landing."""
    method = LandingMethod(method)
    if method is LandingMethod.HULL:
        pts = hull_outline(flight1, flight2)
    else:
        pts = projection_outline(flight1, flight2)

    pts = dedupe_points(pts, TOLERANCE)
    if len(pts) < 3:
        raise UnsupportedLandingGeometry(f"landing outline collapsed to {len(pts)} points")

    plan = PlanPolygon([(p.X, p.Y) for p in pts])
    if not plan.is_valid or plan.area <= TOLERANCE:
        raise UnsupportedLandingGeometry(
            f"landing outline is not a simple polygon with positive area (area={plan.area:.6f})")
    # Normal must point up
    if not plan.exterior.is_ccw:
        pts.reverse()
    return pts


def build_landing(flight1, flight2, method=LandingMethod.PROJECTION, placement=None, name="landing"):
    """Build the landing slab joining flight1's head to flight2's foot.

    The slab top is flush with flight 1's last tread; its thickness is
    flight 1's vertical waist miter.
    """
    pts = landing_outline(flight1, flight2, method)
    thickness = flight1.landing_thickness
    elevation = flight1.walking_line.start.Z + flight1.height() - thickness
    return Floor([(p.X, p.Y) for p in pts], thickness, elevation=elevation,
                 placement=placement, material=flight1.material, name=name)
