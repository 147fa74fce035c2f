#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/text.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#
"""
Extruded text geometry.

Two glyph sources are supported:

* the built-in 5x7 block font, where every horizontal run of lit pixels
  becomes a box, and
* typeface JSON fonts (the format three.js ships, e.g.
  ``helvetiker_regular.typeface.json``), whose glyph outlines are flattened
  into contours and extruded into a cap on each side plus side quads.

Text starts at the origin and extends along +X, baseline at y=0, depth
along +Z.  The scene re-centres it before display.
"""

import json
import logging
import math

from .errors import FontError
from .mesh import Mesh

logger = logging.getLogger(__name__)

DEFAULT_TEXT = "Cory Richard"

# Rows top to bottom, '#' is a lit pixel
BLOCK_GLYPHS = {
    'A': (".###.", "#...#", "#...#", "#####", "#...#", "#...#", "#...#"),
    'B': ("####.", "#...#", "#...#", "####.", "#...#", "#...#", "####."),
    'C': (".###.", "#...#", "#....", "#....", "#....", "#...#", ".###."),
    'D': ("####.", "#...#", "#...#", "#...#", "#...#", "#...#", "####."),
    'E': ("#####", "#....", "#....", "####.", "#....", "#....", "#####"),
    'F': ("#####", "#....", "#....", "####.", "#....", "#....", "#...."),
    'G': (".###.", "#...#", "#....", "#.###", "#...#", "#...#", ".####"),
    'H': ("#...#", "#...#", "#...#", "#####", "#...#", "#...#", "#...#"),
    'I': (".###.", "..#..", "..#..", "..#..", "..#..", "..#..", ".###."),
    'J': ("..###", "...#.", "...#.", "...#.", "...#.", "#..#.", ".##.."),
    'K': ("#...#", "#..#.", "#.#..", "##...", "#.#..", "#..#.", "#...#"),
    'L': ("#....", "#....", "#....", "#....", "#....", "#....", "#####"),
    'M': ("#...#", "##.##", "#.#.#", "#.#.#", "#...#", "#...#", "#...#"),
    'N': ("#...#", "#...#", "##..#", "#.#.#", "#..##", "#...#", "#...#"),
    'O': (".###.", "#...#", "#...#", "#...#", "#...#", "#...#", ".###."),
    'P': ("####.", "#...#", "#...#", "####.", "#....", "#....", "#...."),
    'Q': (".###.", "#...#", "#...#", "#...#", "#.#.#", "#..#.", ".##.#"),
    'R': ("####.", "#...#", "#...#", "####.", "#.#..", "#..#.", "#...#"),
    'S': (".####", "#....", "#....", ".###.", "....#", "....#", "####."),
    'T': ("#####", "..#..", "..#..", "..#..", "..#..", "..#..", "..#.."),
    'U': ("#...#", "#...#", "#...#", "#...#", "#...#", "#...#", ".###."),
    'V': ("#...#", "#...#", "#...#", "#...#", "#...#", ".#.#.", "..#.."),
    'W': ("#...#", "#...#", "#...#", "#.#.#", "#.#.#", "#.#.#", ".#.#."),
    'X': ("#...#", "#...#", ".#.#.", "..#..", ".#.#.", "#...#", "#...#"),
    'Y': ("#...#", "#...#", ".#.#.", "..#..", "..#..", "..#..", "..#.."),
    'Z': ("#####", "....#", "...#.", "..#..", ".#...", "#....", "#####"),
    '0': (".###.", "#...#", "#..##", "#.#.#", "##..#", "#...#", ".###."),
    '1': ("..#..", ".##..", "..#..", "..#..", "..#..", "..#..", ".###."),
    '2': (".###.", "#...#", "....#", "...#.", "..#..", ".#...", "#####"),
    '3': ("#####", "...#.", "..#..", "...#.", "....#", "#...#", ".###."),
    '4': ("...#.", "..##.", ".#.#.", "#..#.", "#####", "...#.", "...#."),
    '5': ("#####", "#....", "####.", "....#", "....#", "#...#", ".###."),
    '6': ("..##.", ".#...", "#....", "####.", "#...#", "#...#", ".###."),
    '7': ("#####", "....#", "...#.", "..#..", ".#...", ".#...", ".#..."),
    '8': (".###.", "#...#", "#...#", ".###.", "#...#", "#...#", ".###."),
    '9': (".###.", "#...#", "#...#", ".####", "....#", "...#.", ".##.."),
    ' ': (".....",) * 7,
    '.': (".....", ".....", ".....", ".....", ".....", ".##..", ".##.."),
    ',': (".....", ".....", ".....", ".....", ".##..", "..#..", ".#..."),
    '!': ("..#..", "..#..", "..#..", "..#..", "..#..", ".....", "..#.."),
    '?': (".###.", "#...#", "....#", "...#.", "..#..", ".....", "..#.."),
    '-': (".....", ".....", ".....", "#####", ".....", ".....", "....."),
    ':': (".....", ".##..", ".##..", ".....", ".##..", ".##..", "....."),
    "'": ("..#..", "..#..", ".#...", ".....", ".....", ".....", "....."),
}

BLOCK_ROWS = 7
BLOCK_ADVANCE = 6      # glyph width plus one column of spacing
BLOCK_LINE_ROWS = 9


def _block_glyph(ch):
    glyph = BLOCK_GLYPHS.get(ch.upper())
    if glyph is None:
        logger.debug("No block glyph for %r, using '?'", ch)
        glyph = BLOCK_GLYPHS['?']
    return glyph


def build_block_text(text: str, size: float = 5.0, depth: float = 0.5) -> Mesh:
    """Extrude ``text`` in the built-in block font; ``size`` is the cap height."""
    px = size / BLOCK_ROWS
    mesh = Mesh()
    for line_no, line in enumerate(text.split('\n')):
        y_base = -line_no * BLOCK_LINE_ROWS * px
        for col_no, ch in enumerate(line):
            x_base = col_no * BLOCK_ADVANCE * px
            for row_no, row in enumerate(_block_glyph(ch)):
                y0 = y_base + (BLOCK_ROWS - 1 - row_no) * px
                start = None
                # Trailing '.' closes the last run
                for i, cell in enumerate(row + '.'):
                    if cell == '#' and start is None:
                        start = i
                    elif cell != '#' and start is not None:
                        mesh.add_box((x_base + start * px, y0, 0.0),
                                     (x_base + i * px, y0 + px, depth))
                        start = None
    return mesh


class TypefaceFont:
    """
    Glyph outlines in the typeface JSON layout.

    ``glyphs`` maps a character to ``{"ha": advance, "o": outline}`` where the
    outline is a space-separated command string: ``m x y`` (move),
    ``l x y`` (line), ``q x y cx cy`` (quadratic, end point first) and
    ``b x y c1x c1y c2x c2y`` (cubic, end point first).  Coordinates are in
    font units, ``resolution`` units per em.
    """

    def __init__(self, data: dict):
        if not isinstance(data, dict):
            raise FontError("typeface data must be a JSON object")
        glyphs = data.get('glyphs')
        if not isinstance(glyphs, dict):
            raise FontError("typeface data has no 'glyphs' table")
        try:
            self.resolution = float(data.get('resolution', 1000))
        except (TypeError, ValueError) as e:
            raise FontError(f"bad resolution: {e}") from e
        if self.resolution <= 0:
            raise FontError("resolution must be positive")
        self.glyphs = glyphs
        self.family_name = data.get('familyName', 'unknown')

        bbox = data.get('boundingBox') or {}
        try:
            self.line_height = (float(bbox['yMax']) - float(bbox['yMin'])
                                + float(data.get('underlineThickness', 0)))
        except (KeyError, TypeError, ValueError):
            self.line_height = self.resolution

    def __repr__(self):
        return f"TypefaceFont({self.family_name!r}, {len(self.glyphs)} glyphs)"

    @classmethod
    def from_json(cls, raw) -> 'TypefaceFont':
        try:
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode('utf-8')
            data = json.loads(raw)
        # UnicodeDecodeError is a ValueError too
        except ValueError as e:
            raise FontError(f"typeface is not valid JSON: {e}") from e
        return cls(data)

    @classmethod
    def from_file(cls, filename) -> 'TypefaceFont':
        try:
            with open(filename, 'rb') as f:
                return cls.from_json(f.read())
        except OSError as e:
            raise FontError(f"could not read '{filename}': {e}") from e

    def glyph(self, ch):
        glyph = self.glyphs.get(ch) or self.glyphs.get('?')
        if glyph is None:
            logger.warning("Font %s has no glyph for %r", self.family_name, ch)
        elif not isinstance(glyph, dict):
            raise FontError(f"glyph {ch!r} is not a JSON object")
        return glyph

    def contours(self, ch, scale: float, offset_x: float, offset_y: float,
                 curve_segments: int = 12):
        """Flatten one glyph into closed polylines; returns (contours, advance)."""
        glyph = self.glyph(ch)
        if glyph is None:
            return [], 0.0

        try:
            advance = float(glyph.get('ha', 0)) * scale
        except (TypeError, ValueError) as e:
            raise FontError(f"bad advance in glyph {ch!r}: {e}") from e

        tokens = str(glyph.get('o', '')).split()
        contours = []
        current = None
        i = 0
        try:
            while i < len(tokens):
                action = tokens[i]
                i += 1
                nums = _COMMAND_ARITY.get(action)
                if nums is None:
                    raise FontError(f"unknown outline command {action!r} in glyph {ch!r}")
                vals = [float(v) for v in tokens[i:i + nums]]
                if len(vals) != nums:
                    raise FontError(f"truncated outline in glyph {ch!r}")
                i += nums
                pts = [(vals[k] * scale + offset_x, vals[k + 1] * scale + offset_y)
                       for k in range(0, nums, 2)]

                if action == 'm':
                    current = [pts[0]]
                    contours.append(current)
                    continue
                if current is None:
                    raise FontError(f"outline of glyph {ch!r} draws before moving")
                if action == 'l':
                    current.append(pts[0])
                elif action == 'q':
                    end, ctrl = pts
                    current.extend(_quadratic(current[-1], ctrl, end, curve_segments))
                else:
                    end, c1, c2 = pts
                    current.extend(_cubic(current[-1], c1, c2, end, curve_segments))
        except ValueError as e:
            raise FontError(f"bad number in glyph {ch!r}: {e}") from e

        cleaned = []
        for c in contours:
            if len(c) > 1 and c[0] == c[-1]:
                c = c[:-1]
            if len(c) >= 3:
                cleaned.append(c)
        return cleaned, advance


_COMMAND_ARITY = {'m': 2, 'l': 2, 'q': 4, 'b': 6}


def _quadratic(p0, p1, p2, segments):
    out = []
    for s in range(1, segments + 1):
        t = s / segments
        u = 1.0 - t
        out.append((u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                    u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1]))
    return out


def _cubic(p0, p1, p2, p3, segments):
    out = []
    for s in range(1, segments + 1):
        t = s / segments
        u = 1.0 - t
        a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
        out.append((a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
                    a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1]))
    return out


def signed_area(contour) -> float:
    """Shoelace area; positive for counter-clockwise (Y up) contours."""
    area = 0.0
    n = len(contour)
    for i in range(n):
        x0, y0 = contour[i]
        x1, y1 = contour[(i + 1) % n]
        area += x0 * y1 - x1 * y0
    return area * 0.5


def extrude_contours(mesh: Mesh, contours, depth: float):
    """
    Append caps and side walls for one glyph's contours.

    Sides keep the glyph's own outer/hole relationship: the contours are
    flipped together when the largest one runs clockwise.  Caps are always
    wound counter-clockwise on the front (z=0) and clockwise on the back so
    the outline shows from either side.
    """
    if not contours:
        return
    largest = max(contours, key=lambda c: abs(signed_area(c)))
    if signed_area(largest) < 0:
        contours = [c[::-1] for c in contours]

    for contour in contours:
        n = len(contour)
        base = len(mesh.vertices)
        for x, y in contour:
            mesh.vertices.append([x, y, 0.0])
        for x, y in contour:
            mesh.vertices.append([x, y, depth])

        front = list(range(base, base + n))
        back = list(range(base + n, base + 2 * n))
        if signed_area(contour) < 0:
            front.reverse()
            back.reverse()
        mesh.faces.append(front)
        mesh.faces.append(back[::-1])

        for i in range(n):
            j = (i + 1) % n
            mesh.faces.append([base + i, base + n + i, base + n + j, base + j])


def build_typeface_text(text: str, font: TypefaceFont, size: float = 5.0,
                        depth: float = 0.5, curve_segments: int = 12) -> Mesh:
    """Extrude ``text`` drawn with ``font``; ``size`` is the em size."""
    scale = size / font.resolution
    line_height = font.line_height * scale
    mesh = Mesh()
    offset_x = offset_y = 0.0
    for ch in text:
        if ch == '\n':
            offset_x = 0.0
            offset_y -= line_height
            continue
        contours, advance = font.contours(ch, scale, offset_x, offset_y, curve_segments)
        extrude_contours(mesh, contours, depth)
        offset_x += advance
    return mesh


def build_text_mesh(text: str = DEFAULT_TEXT, font=None, size: float = 5.0,
                    depth: float = 0.5, curve_segments: int = 12) -> Mesh:
    """Text geometry in ``font``, or the built-in block font when None."""
    if font is None:
        mesh = build_block_text(text, size, depth)
    else:
        mesh = build_typeface_text(text, font, size, depth, curve_segments)
    logger.debug("Text %r: %d vertices, %d faces", text, len(mesh.vertices), len(mesh.faces))
    return mesh
