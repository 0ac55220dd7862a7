"""Horizontal slab element.
Extrudes a plan polygon upward by a thickness from an elevation plane.
Used to materialize stair landings.
"""
import math
from build123d import *
from shapely.geometry import Polygon as PlanPolygon

from stair_errors import ParameterOutOfRange
from stair_type import DEFAULT_MATERIAL


class Floor:
    """A slab whose underside sits at `elevation` and top at elevation + thickness.

    Args:
        polygon: Plan outline as (x, y) tuples or Vectors, counter-clockwise.
        thickness: Slab thickness, > 0.
        elevation: Z of the slab underside.
        placement: Optional build123d Location applied to the solid.
        material: Material record.
        name: Element name used in exports.
    """

    def __init__(self, polygon, thickness, elevation=0.0, placement=None,
                 material=DEFAULT_MATERIAL, name="floor"):
        if not isinstance(thickness, (int, float)) or not math.isfinite(thickness) or thickness <= 0:
            raise ParameterOutOfRange("thickness", thickness,
                                      f"thickness must be a positive number, got {thickness!r}")
        pts = [(float(Vector(p).X), float(Vector(p).Y)) for p in polygon]
        if len(pts) < 3:
            raise ParameterOutOfRange("polygon", len(pts), "a floor polygon needs at least 3 points")

        self.points = tuple(pts)
        self.thickness = thickness
        self.elevation = elevation
        self.placement = placement
        self.material = material
        self.name = name
        self.solid = self._extrude()

    def _extrude(self):
        pts = list(self.points)
        with BuildPart() as bp:
            with BuildSketch(Plane.XY.offset(self.elevation)):
                with BuildLine():
                    Polyline(pts + [pts[0]])
                make_face()
            extrude(amount=self.thickness)
        part = bp.part
        if self.placement is not None:
            part = part.moved(self.placement)
        return part

    def vertices(self):
        """Outline at the slab underside, as 3D Vectors (before placement)."""
        return [Vector(x, y, self.elevation) for x, y in self.points]

    def area(self) -> float:
        return PlanPolygon(self.points).area

    def __repr__(self):
        return f"Floor({self.name!r}, area={self.area():.3f}, elevation={self.elevation:.3f})"
