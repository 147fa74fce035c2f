#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/canvas.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

# Depths are stored as integers in thousandths of a world unit
DEPTH_SCALE = 1000
FAR_DEPTH = 1 << 30
# Pushes the depth prepass behind the edges drawn on top of it
POLYGON_OFFSET = 50

ASCII_RAMP = " .:-=+*#%@"


class Canvas:
    """
    Dot canvas with a per-dot Z-buffer.

    Dots are grouped into 2x4 cells, one terminal character each.  ``grid``
    holds an 8-bit mask per cell and ``cell_z`` the nearest depth drawn into
    it, which the renderer uses for depth shading.
    """
    __slots__ = ['w', 'h', 'grid', 'z_buffer', 'cell_z']

    # Braille dot mapping for 2x4 grid
    #  1 4
    #  2 5
    #  3 6
    #  7 8
    BRAILLE_REMAP = [0x01, 0x02, 0x04, 0x40, 0x08, 0x10, 0x20, 0x80]

    def __init__(self, w, h):
        self.w, self.h = w, h
        cw, ch = w // 2 + 1, h // 4 + 1
        self.grid = [[0] * cw for _ in range(ch)]
        self.z_buffer = [[FAR_DEPTH] * w for _ in range(h)]
        self.cell_z = [[FAR_DEPTH] * cw for _ in range(ch)]

    def set_pixel(self, x, y, z_int):
        if x < 0 or x >= self.w or y < 0 or y >= self.h:
            return
        if z_int < self.z_buffer[y][x]:
            self.z_buffer[y][x] = z_int
            cx, cy = x >> 1, y >> 2
            # Bits 0-3 are the left column top to bottom, 4-7 the right
            self.grid[cy][cx] |= (1 << ((y & 3) + (x & 1) * 4))
            if z_int < self.cell_z[cy][cx]:
                self.cell_z[cy][cx] = z_int

    def draw_line(self, p1, p2):
        """DDA line between screen points ``(x, y, depth)`` with depth test."""
        x1, y1, z1 = int(p1[0]), int(p1[1]), p1[2] * DEPTH_SCALE
        x2, y2, z2 = int(p2[0]), int(p2[1]), p2[2] * DEPTH_SCALE

        dx = x2 - x1
        dy = y2 - y1
        step = max(abs(dx), abs(dy))
        if step == 0:
            self.set_pixel(x1, y1, int(min(z1, z2)))
            return

        x_inc = dx / step
        y_inc = dy / step
        z_inc = (z2 - z1) / step
        cx, cy, cz = float(x1), float(y1), z1
        for _ in range(step + 1):
            self.set_pixel(int(cx), int(cy), int(cz))
            cx += x_inc
            cy += y_inc
            cz += z_inc

    def fill_depth(self, p1, p2, p3):
        """
        Rasterize a triangle into the Z-buffer only, so edges behind the
        object's surface fail the depth test.
        """
        pts = sorted((p1, p2, p3), key=lambda p: p[1])
        (x1, y1, z1), (x2, y2, z2), (x3, y3, z3) = [
            (int(p[0]), int(p[1]), p[2] * DEPTH_SCALE + POLYGON_OFFSET) for p in pts]
        if y3 == y1:
            return

        def edge_at(y, ya, xa, za, yb, xb, zb):
            t = (y - ya) / (yb - ya) if yb != ya else 0.0
            return xa + (xb - xa) * t, za + (zb - za) * t

        w, h = self.w, self.h
        for y in range(max(0, y1), min(h, y3)):
            xa, za = edge_at(y, y1, x1, z1, y3, x3, z3)
            if y < y2:
                xb, zb = edge_at(y, y1, x1, z1, y2, x2, z2)
            else:
                xb, zb = edge_at(y, y2, x2, z2, y3, x3, z3)
            if xa > xb:
                xa, xb, za, zb = xb, xa, zb, za

            sx, ex = int(xa), int(xb)
            z_slope = (zb - za) / (ex - sx) if ex != sx else 0.0
            start_x = max(0, sx)
            curr_z = za + z_slope * (start_x - sx)
            row = self.z_buffer[y]
            for x in range(start_x, min(w, ex)):
                if curr_z < row[x]:
                    row[x] = int(curr_z)
                curr_z += z_slope


def render_cell_ascii(mask: int) -> str:
    """Density character for a 2x4 cell, for terminals without Braille."""
    if not mask:
        return ' '
    density = bin(mask).count('1')
    return ASCII_RAMP[density] if density < len(ASCII_RAMP) else '@'


def render_cell_braille(mask: int) -> str:
    """Renders a 2x4 cell mask as a Unicode Braille character."""
    if not mask:
        return ' '
    b = sum(Canvas.BRAILLE_REMAP[i] for i in range(8) if mask & (1 << i))
    return chr(0x2800 + b)
