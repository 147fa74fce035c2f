#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/mesh.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import logging

from .errors import MeshLoadError

logger = logging.getLogger(__name__)


class Mesh:
    """Vertex list plus polygon faces (lists of 0-based vertex indices)."""

    def __init__(self, vertices=None, faces=None):
        self.vertices = [list(v) for v in vertices] if vertices else []
        self.faces = [list(f) for f in faces] if faces else []

    def __repr__(self):
        return f"Mesh(vertices={len(self.vertices)}, faces={len(self.faces)})"

    def is_empty(self) -> bool:
        return not self.vertices

    @classmethod
    def parse_obj(cls, text: str) -> 'Mesh':
        """
        Build a mesh from Wavefront OBJ text.

        Only ``v`` and ``f`` records are used.  Face tokens may be ``v``,
        ``v/vt``, ``v//vn`` or ``v/vt/vn``; negative indices count back from
        the last vertex defined so far.
        """
        mesh = cls()
        for lineno, line in enumerate(text.splitlines(), 1):
            parts = line.split()
            if not parts:
                continue
            try:
                if parts[0] == 'v':
                    mesh.vertices.append([float(x) for x in parts[1:4]])
                    if len(mesh.vertices[-1]) != 3:
                        raise ValueError("vertex needs three coordinates")
                elif parts[0] == 'f':
                    face = []
                    for token in parts[1:]:
                        idx = int(token.split('/')[0])
                        idx = idx - 1 if idx > 0 else len(mesh.vertices) + idx
                        if idx < 0 or idx >= len(mesh.vertices):
                            raise ValueError(f"vertex index {token} out of range")
                        face.append(idx)
                    if len(face) >= 3:
                        mesh.faces.append(face)
            except ValueError as e:
                raise MeshLoadError(f"line {lineno}: {e}") from e
        return mesh

    @classmethod
    def from_bytes(cls, data: bytes, encoding: str = 'utf-8') -> 'Mesh':
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as e:
            raise MeshLoadError(f"OBJ data is not {encoding} text: {e}") from e
        return cls.parse_obj(text)

    @classmethod
    def from_obj(cls, filename) -> 'Mesh':
        """Factory method to create a mesh from an OBJ file."""
        try:
            with open(filename, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise MeshLoadError(f"could not read '{filename}': {e}") from e
        mesh = cls.from_bytes(data)
        logger.info("Loaded %s: %d vertices, %d faces", filename,
                    len(mesh.vertices), len(mesh.faces))
        return mesh

    @classmethod
    def cube(cls, half: float = 1.0) -> 'Mesh':
        """Cube centred at the origin, used when no model is available."""
        return cls.box((-half, -half, -half), (half, half, half))

    @classmethod
    def box(cls, lo, hi) -> 'Mesh':
        mesh = cls()
        mesh.add_box(lo, hi)
        return mesh

    def add_box(self, lo, hi):
        """Append an axis-aligned box with outward-facing quads."""
        x0, y0, z0 = lo
        x1, y1, z1 = hi
        base = len(self.vertices)
        self.vertices.extend([
            [x0, y0, z0], [x1, y0, z0], [x1, y1, z0], [x0, y1, z0],
            [x0, y0, z1], [x1, y0, z1], [x1, y1, z1], [x0, y1, z1],
        ])
        for face in ((0, 1, 2, 3),   # front
                     (5, 4, 7, 6),   # back
                     (4, 0, 3, 7),   # left
                     (1, 5, 6, 2),   # right
                     (3, 2, 6, 7),   # top
                     (4, 5, 1, 0)):  # bottom
            self.faces.append([base + i for i in face])

    def translate(self, dx: float, dy: float, dz: float) -> 'Mesh':
        """Shift every vertex in place; returns self for chaining."""
        for v in self.vertices:
            v[0] += dx
            v[1] += dy
            v[2] += dz
        return self
