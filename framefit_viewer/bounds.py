#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/bounds.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

from .math_utils import Vec3


class BoundingBox:
    """
    Axis-aligned world-space box around an object's geometry.

    ``size`` is ``max - min`` and is never negative.  A box built from no
    points (or from a single point) has zero size; framing treats that as
    "nothing to fit".
    """
    __slots__ = ('min', 'max')

    def __init__(self, min_corner, max_corner):
        lo = Vec3.of(min_corner)
        hi = Vec3.of(max_corner)
        # Tolerate swapped corners so size stays non-negative
        self.min = lo.min(hi)
        self.max = lo.max(hi)

    def __repr__(self):
        return f"BoundingBox(min={self.min!r}, max={self.max!r})"

    def __eq__(self, other):
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    @classmethod
    def empty(cls) -> 'BoundingBox':
        return cls(Vec3.zero(), Vec3.zero())

    @classmethod
    def from_points(cls, points, offset=(0.0, 0.0, 0.0)) -> 'BoundingBox':
        """Union box of ``points`` shifted by ``offset``.

        An empty iterable yields a zero-size box at the origin.
        """
        ox, oy, oz = offset
        it = iter(points)
        try:
            first = next(it)
        except StopIteration:
            return cls.empty()

        x0 = x1 = first[0] + ox
        y0 = y1 = first[1] + oy
        z0 = z1 = first[2] + oz
        for p in it:
            x, y, z = p[0] + ox, p[1] + oy, p[2] + oz
            if x < x0: x0 = x
            elif x > x1: x1 = x
            if y < y0: y0 = y
            elif y > y1: y1 = y
            if z < z0: z0 = z
            elif z > z1: z1 = z
        return cls(Vec3(x0, y0, z0), Vec3(x1, y1, z1))

    @property
    def size(self) -> Vec3:
        return self.max - self.min

    @property
    def center(self) -> Vec3:
        return (self.min + self.max) * 0.5

    def corners(self):
        """The eight corner points, min corner first."""
        lo, hi = self.min, self.max
        return [Vec3(x, y, z) for x in (lo.x, hi.x) for y in (lo.y, hi.y) for z in (lo.z, hi.z)]

    def is_empty(self) -> bool:
        return self.size.is_zero()

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(self.min.min(other.min), self.max.max(other.max))


def compute_bounds(obj) -> BoundingBox:
    """
    Object Bounds Provider.

    Accepts a scene object (anything with ``mesh`` and ``position``) or a bare
    mesh (anything with ``vertices``) and returns its world-space box.  Never
    mutates the object.
    """
    if obj is None:
        return BoundingBox.empty()

    mesh = getattr(obj, 'mesh', obj)
    offset = tuple(getattr(obj, 'position', (0.0, 0.0, 0.0)))
    box = BoundingBox.from_points(mesh.vertices, offset)

    # Child objects contribute their own geometry, if any
    for child in getattr(obj, 'children', ()):
        child_box = compute_bounds(child)
        if not child_box.is_empty():
            box = child_box if box.is_empty() else box.union(child_box)
    return box
