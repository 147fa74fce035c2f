#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/context.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

from dataclasses import dataclass, field

from .camera import Camera
from .scene import Scene


@dataclass
class Viewport:
    """Drawable area in canvas dots (2x4 dots per terminal cell)."""
    width: int = 0
    height: int = 0

    @classmethod
    def from_terminal(cls, rows: int, cols: int) -> 'Viewport':
        # One column is kept free on the right, one row each for HUD and margin
        return cls(width=max(0, (cols - 1) * 2), height=max(0, (rows - 2) * 4))

    @property
    def aspect(self) -> float:
        if self.height <= 0:
            return 1.0
        return self.width / self.height

    def is_drawable(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass
class RenderContext:
    """Camera, viewport and scene handed to the fit and render passes."""
    camera: Camera = field(default_factory=Camera)
    viewport: Viewport = field(default_factory=Viewport)
    scene: Scene = field(default_factory=Scene)
