#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/__init__.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

from .math_utils import Vec3
from .bounds import BoundingBox, compute_bounds
from .camera import Camera
from .framing import FrameFitRequest, FrameFitResult, solve, view_bounds, fit_camera, fit_context
from .config import RenderConfig, ViewerProfile, PROFILES
from .mesh import Mesh
from .scene import Scene, SceneObject
from .context import RenderContext, Viewport
from .text import TypefaceFont, build_text_mesh
from .loader import LoadTask, load_model, load_text
from .renderer import Renderer
from .errors import LoadError, MeshLoadError, FontError, LoadCancelled
