#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/scene.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

from .bounds import BoundingBox
from .mesh import Mesh


class SceneObject:
    """A mesh placed at a world-space offset."""
    __slots__ = ('mesh', 'position')

    def __init__(self, mesh: Mesh, position=(0.0, 0.0, 0.0)):
        self.mesh = mesh
        self.position = (float(position[0]), float(position[1]), float(position[2]))

    def __repr__(self):
        return f"SceneObject({len(self.mesh.vertices)} vertices at {self.position})"


class Scene:
    """
    Container for the single displayed object.

    Setting a new object replaces the previous one.  By default the object is
    re-centred so its bounding-box centre sits at the world origin, which is
    where the camera looks.
    """

    def __init__(self):
        self.object = None  # SceneObject or None

    def set_object(self, mesh: Mesh, recenter: bool = True) -> SceneObject:
        """Display ``mesh``, replacing whatever was shown before.

        Args:
            mesh: Mesh to render.
            recenter: Offset the mesh so its bounds are centred on the origin.
        """
        position = (0.0, 0.0, 0.0)
        if recenter and mesh.vertices:
            c = BoundingBox.from_points(mesh.vertices).center
            position = (-c.x, -c.y, -c.z)
        self.object = SceneObject(mesh, position)
        return self.object

    def clear(self):
        """Remove the displayed object."""
        self.object = None

    @property
    def is_empty(self) -> bool:
        return self.object is None
