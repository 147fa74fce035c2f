#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/camera.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import math

from .math_utils import Vec3


class Camera:
    """
    Perspective orbit camera.

    The camera circles ``target`` at ``distance`` using pitch/yaw angles and
    always looks at the target.  With zero angles it sits on the -Z axis
    looking down +Z, screen X to the right and Y up.

    ``aspect`` is viewport width / height.  After changing ``fov`` or
    ``aspect`` call ``update_projection_matrix()``; the renderer and
    ``project()`` read the cached coefficients, not the raw parameters.
    """
    __slots__ = ('fov', 'aspect', 'near', 'far', 'distance', 'pitch', 'yaw',
                 'target', 'flip', 'proj_x', 'proj_y')

    def __init__(self, fov: float = 75.0, aspect: float = 1.0,
                 near: float = 0.1, far: float = 1000.0, distance: float = 50.0):
        self.fov = fov           # Vertical field of view (degrees)
        self.aspect = aspect     # Viewport width / height
        self.near = near         # Near clip plane
        self.far = far           # Far clip plane
        self.distance = distance # Distance from target along the view axis
        self.pitch = 0.0         # Rotation around X axis (radians)
        self.yaw = 0.0           # Rotation around Y axis (radians)
        self.target = Vec3.zero()
        self.flip = False        # Winding-order flip toggle
        self.proj_x = 0.0
        self.proj_y = 0.0
        self.update_projection_matrix()

    def update_projection_matrix(self):
        """Recompute the cached perspective coefficients from fov/aspect."""
        f = 1.0 / math.tan(math.radians(self.fov) / 2.0)
        self.proj_y = f
        self.proj_x = f / self.aspect

    def basis(self):
        """Row-major 3x3 world-to-camera rotation as a flat 9-tuple."""
        cx_r = math.cos(self.pitch)
        sx_r = math.sin(self.pitch)
        cy_r = math.cos(self.yaw)
        sy_r = math.sin(self.yaw)
        return (cy_r,   sx_r * sy_r, cx_r * sy_r,
                0.0,    cx_r,        -sx_r,
                -sy_r,  sx_r * cy_r, cx_r * cy_r)

    @property
    def forward(self) -> Vec3:
        """World-space unit vector from the camera towards the target."""
        m = self.basis()
        return Vec3(m[6], m[7], m[8])

    @property
    def position(self) -> Vec3:
        return self.target - self.forward * self.distance

    def look_at(self, target=(0.0, 0.0, 0.0)):
        """Aim the camera at ``target``, keeping distance and orbit angles."""
        self.target = Vec3.of(target)

    def to_camera_space(self, x, y, z):
        m0, m1, m2, m3, m4, m5, m6, m7, m8 = self.basis()
        x -= self.target.x
        y -= self.target.y
        z -= self.target.z
        return (x * m0 + y * m1 + z * m2,
                x * m3 + y * m4 + z * m5,
                x * m6 + y * m7 + z * m8 + self.distance)

    def project(self, point):
        """
        Project a world point to normalized device coordinates.

        Returns ``(ndc_x, ndc_y, depth)`` with the visible frustum spanning
        [-1, 1] on both axes, or None when the point is not beyond the near
        plane.
        """
        rx, ry, rz = self.to_camera_space(point[0], point[1], point[2])
        if rz <= self.near:
            return None
        return (rx * self.proj_x / rz, ry * self.proj_y / rz, rz)

    def orbit(self, dyaw: float, dpitch: float):
        """Adjust orbital angles by delta (radians)."""
        self.yaw += dyaw
        self.pitch += dpitch

    def reset_orbit(self):
        self.yaw = 0.0
        self.pitch = 0.0

    def zoom(self, delta: float):
        """Adjust camera distance. Positive = further, negative = closer."""
        self.distance = max(self.near, self.distance + delta)

    def adjust_fov(self, delta: float):
        """Adjust field of view by delta degrees, clamped to [10, 170]."""
        self.fov = max(10, min(170, self.fov + delta))
        self.update_projection_matrix()
