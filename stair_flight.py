"""Straight stair flight for build123d.
Builds one uninterrupted run of steps along a walking line and sweeps its
stepped profile across the flight width.
"""
from build123d import *

from flight_profile import build_flight_profile
from stair_errors import ParameterOutOfRange
from stair_geometry import WORLD_UP, WalkingLine, count_fitting
from stair_type import DEFAULT_MATERIAL, StairFlightSpec


class StairFlight:
    """One straight flight, immutable once built.

    The local frame has X along the walking line, Z = X x up (across the
    flight) and Y = Z x X (up for a level walking line). The profile is
    drawn in that frame's XY plane and extruded half the width to each side.

    Args:
        walking_line: Directed line from the foot to the head of the flight.
        spec: Validated StairFlightSpec.
        placement: Optional build123d Location, applied in world space on
            top of the walking line frame.
        material: Material record, DEFAULT_MATERIAL when omitted.
        name: Element name used in exports.
    """

    both_sides = True

    def __init__(self, walking_line: WalkingLine, spec: StairFlightSpec,
                 placement: Location = None, material=DEFAULT_MATERIAL,
                 name: str = "flight"):
        if not isinstance(spec, StairFlightSpec):
            raise TypeError(f"spec must be a StairFlightSpec, got {type(spec).__name__}")

        direction = walking_line.direction()
        across = direction.cross(WORLD_UP)
        if across.length <= 1e-9:
            raise ParameterOutOfRange("walking_line", walking_line,
                                      "walking_line must not be vertical")

        n_treads = count_fitting(walking_line.length(), spec.tread_length)
        if n_treads < 1:
            raise ParameterOutOfRange(
                "walking_line", walking_line.length(),
                f"walking_line length {walking_line.length():.4f} is shorter than "
                f"one tread ({spec.tread_length})")

        profile = build_flight_profile(n_treads, spec.riser_height, spec.tread_length,
                                       spec.waist_thickness, spec.nosing_length)
        if profile.base_thickness >= n_treads * spec.tread_length:
            raise ParameterOutOfRange(
                "waist_thickness", spec.waist_thickness,
                f"waist_thickness {spec.waist_thickness} is too thick for a flight "
                f"of {n_treads} treads")

        base_plane = Plane(origin=walking_line.start, x_dir=direction,
                           z_dir=across.normalized())
        # Placement applies in world space; base_plane stays unplaced
        if placement is not None:
            plane = Plane(placement * base_plane.location)
        else:
            plane = Plane(base_plane.location)

        self._walking_line = walking_line
        self._spec = spec
        self._placement = placement
        self._number_of_treads = n_treads
        self._profile = profile
        self._base_plane = base_plane
        self._plane = plane
        self.material = material
        self.name = name

        self._start = plane.from_local_coords((0, 0, 0))
        self._end = plane.from_local_coords((profile.top_point[0], profile.top_point[1], 0))
        self._solid = self._sweep()

    def _sweep(self):
        pts = list(self._profile.points)
        with BuildPart() as bp:
            with BuildSketch(self._plane):
                with BuildLine():
                    Polyline(pts + [pts[0]])
                make_face()
            extrude(amount=self.extrude_depth / 2, both=True)
        return bp.part

    # --- Dimensions ---
    @property
    def walking_line(self) -> WalkingLine:
        return self._walking_line

    @property
    def spec(self) -> StairFlightSpec:
        return self._spec

    @property
    def riser_height(self) -> float:
        return self._spec.riser_height

    @property
    def tread_length(self) -> float:
        return self._spec.tread_length

    @property
    def waist_thickness(self) -> float:
        return self._spec.waist_thickness

    @property
    def flight_width(self) -> float:
        return self._spec.flight_width

    @property
    def nosing_length(self) -> float:
        return self._spec.nosing_length

    @property
    def number_of_treads(self) -> int:
        return self._number_of_treads

    @property
    def number_of_risers(self) -> int:
        return self._number_of_treads

    def height(self) -> float:
        return self.riser_height * self.number_of_risers

    # --- Geometry ---
    @property
    def profile(self):
        return self._profile

    @property
    def landing_thickness(self) -> float:
        return self._profile.landing_thickness

    @property
    def base_thickness(self) -> float:
        return self._profile.base_thickness

    @property
    def base_plane(self) -> Plane:
        """Walking line frame before the placement is applied."""
        return self._base_plane

    @property
    def plane(self) -> Plane:
        return self._plane

    @property
    def placement(self):
        return self._placement

    @property
    def start(self) -> Vector:
        return self._start

    @property
    def end(self) -> Vector:
        return self._end

    @property
    def extrude_depth(self) -> float:
        return self.flight_width

    @property
    def extrude_direction(self) -> Vector:
        return self._plane.z_dir

    @property
    def solid(self):
        return self._solid

    def profile_points_world(self):
        """Profile vertices in world coordinates (placement applied)."""
        return [self._plane.from_local_coords((x, y, 0)) for x, y in self._profile.points]

    def __repr__(self):
        return (f"StairFlight({self.name!r}, treads={self.number_of_treads}, "
                f"height={self.height():.3f})")


def build_flight(walking_line, spec, placement=None, material=DEFAULT_MATERIAL):
    """Build a standalone flight; raises ParameterOutOfRange on bad input."""
    return StairFlight(walking_line, spec, placement=placement, material=material)
