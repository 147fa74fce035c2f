#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/framing.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#
"""
Viewport-aware object framing.

Given an object's bounding box and a perspective camera, find the camera
distance at which the object's binding dimension spans ``coverage`` of the
frustum cross-section.  The binding dimension is height when the viewport is
proportionally at least as wide as the object, width otherwise.

``solve`` is pure.  ``fit_camera`` and ``fit_context`` apply its result to a
camera the way the viewer does on object-ready and resize.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .bounds import BoundingBox, compute_bounds
from .camera import Camera

logger = logging.getLogger(__name__)

FIT_HEIGHT = "height"
FIT_WIDTH = "width"

# Extra distance added on top of near + half depth when clamping
NEAR_MARGIN = 1.0


@dataclass(frozen=True)
class FrameFitRequest:
    bounds: BoundingBox
    fov: float          # vertical, degrees
    aspect: float       # viewport width / height
    near: float
    coverage: float = 0.9

    @classmethod
    def for_camera(cls, camera: Camera, bounds: BoundingBox,
                   coverage: float = 0.9) -> 'FrameFitRequest':
        return cls(bounds=bounds, fov=camera.fov, aspect=camera.aspect,
                   near=camera.near, coverage=coverage)


@dataclass(frozen=True)
class FrameFitResult:
    """Outcome of a fit.  ``distance`` is None when there was nothing to fit."""
    distance: Optional[float] = None
    branch: Optional[str] = None
    clamped: bool = False

    @property
    def skipped(self) -> bool:
        return self.distance is None


def _check_request(request: FrameFitRequest):
    assert 0.0 < request.fov < 180.0, f"field of view must be in (0, 180), got {request.fov}"
    assert request.aspect > 0.0, f"aspect ratio must be positive, got {request.aspect}"
    assert request.near > 0.0, f"near plane must be positive, got {request.near}"
    assert 0.0 < request.coverage <= 1.0, f"coverage must be in (0, 1], got {request.coverage}"


def solve(request: FrameFitRequest) -> FrameFitResult:
    """Compute the camera distance that frames ``request.bounds``."""
    size = request.bounds.size
    if size.is_zero():
        return FrameFitResult()

    _check_request(request)

    sx, sy, sz = size
    half_vfov = math.radians(request.fov) / 2.0

    # A flat object (no height) is infinitely wide
    if sy > 0.0 and request.aspect >= sx / sy:
        branch = FIT_HEIGHT
        required = (sy / request.coverage / 2.0) / math.tan(half_vfov)
    else:
        branch = FIT_WIDTH
        half_hfov = math.atan(math.tan(half_vfov) * request.aspect)
        required = (sx / request.coverage / 2.0) / math.tan(half_hfov)

    # Measured from the object's centre, so step back over its front half
    distance = required + sz / 2.0

    clamped = False
    if distance < request.near:
        logger.warning("Object too close to the near plane (%.4f < %.4f), clamping distance",
                       distance, request.near)
        distance = request.near + sz / 2.0 + NEAR_MARGIN
        clamped = True

    assert math.isfinite(distance), f"non-finite camera distance for {request!r}"
    logger.debug("Fit by %s: size=%r aspect=%.3f distance=%.4f", branch, size,
                 request.aspect, distance)
    return FrameFitResult(distance=distance, branch=branch, clamped=clamped)


def view_bounds(camera: Camera, bounds: BoundingBox) -> BoundingBox:
    """
    ``bounds`` measured along the camera's right, up and forward axes.

    For the front view this is ``bounds`` itself.  After orbiting it is the
    box around the rotated corners, so width and height are what the
    viewport actually shows.
    """
    m = camera.basis()
    return BoundingBox.from_points(
        (m[0] * p.x + m[1] * p.y + m[2] * p.z,
         m[3] * p.x + m[4] * p.y + m[5] * p.z,
         m[6] * p.x + m[7] * p.y + m[8] * p.z) for p in bounds.corners())


def fit_camera(camera: Camera, bounds: BoundingBox, coverage: float = 0.9,
               reset_view: bool = False) -> FrameFitResult:
    """
    Fit ``bounds`` into ``camera`` in place.

    A skipped fit leaves the camera untouched.  Otherwise the distance is
    written, the camera re-aimed at the origin (where objects are centred)
    and its projection recomputed.  ``reset_view`` also returns the orbit to
    the front view.
    """
    if bounds.is_empty():
        logger.debug("Nothing to fit, camera unchanged")
        return FrameFitResult()

    if reset_view:
        camera.reset_orbit()
    result = solve(FrameFitRequest.for_camera(camera, view_bounds(camera, bounds), coverage))
    camera.distance = result.distance
    camera.look_at((0.0, 0.0, 0.0))
    camera.update_projection_matrix()
    return result


def fit_context(ctx, coverage: float = 0.9, reset_view: bool = False) -> FrameFitResult:
    """Fit the context's scene object using the context's viewport aspect."""
    if ctx.viewport.height > 0 and ctx.viewport.width > 0:
        ctx.camera.aspect = ctx.viewport.aspect
        ctx.camera.update_projection_matrix()
    bounds = compute_bounds(ctx.scene.object)
    return fit_camera(ctx.camera, bounds, coverage, reset_view)
