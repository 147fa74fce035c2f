#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/renderer.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import curses

from .canvas import FAR_DEPTH, Canvas, render_cell_ascii, render_cell_braille
from .config import RenderConfig
from .context import RenderContext


class Renderer:
    """
    Wireframe renderer for the scene's single object.

    ``rasterize(ctx, config)`` draws the object into a fresh Canvas sized to
    the context's viewport; ``render(stdscr, ctx, config)`` also writes the
    canvas to the curses screen.  The renderer reads the camera's cached
    projection coefficients, so callers must have run
    ``camera.update_projection_matrix()`` after changing fov or aspect.
    """

    def __init__(self, shades=None, bg_attr=0):
        # Attributes for near and far edges; plain until init_colors() runs
        self.shades = shades or [curses.A_BOLD, curses.A_NORMAL]
        self.bg_attr = bg_attr

    def init_colors(self, config, obj_rgb=None, bg_rgb=None):
        """Initialize curses color pairs.  Call once after curses.wrapper init."""
        from .color import init_palette
        self.shades, self.bg_attr = init_palette(config, obj_rgb, bg_rgb)

    def rasterize(self, ctx: RenderContext, config: RenderConfig) -> Canvas:
        """
        Pipeline:
          1. Transform vertices to camera space, drop those not past near
          2. Perspective-project to dot coordinates
          3. Per face: frustum side cull, backface cull, Z-prepass, edges
        """
        W, H = ctx.viewport.width, ctx.viewport.height
        canv = Canvas(max(W, 0), max(H, 0))
        obj = ctx.scene.object
        if obj is None or not ctx.viewport.is_drawable():
            return canv

        camera = ctx.camera
        m0, m1, m2, m3, m4, m5, m6, m7, m8 = camera.basis()
        tx, ty, tz = camera.target
        ox, oy, oz = obj.position
        ox -= tx
        oy -= ty
        oz -= tz

        half_w = W * 0.5
        half_h = H * 0.5
        sx_f = camera.proj_x * half_w
        sy_f = camera.proj_y * half_h
        near_clip = camera.near
        far_clip = camera.far
        cam_z = camera.distance

        mesh = obj.mesh
        proj_v = [None] * len(mesh.vertices)
        for i, v in enumerate(mesh.vertices):
            vx = v[0] + ox
            vy = v[1] + oy
            vz = v[2] + oz

            rz = vx * m6 + vy * m7 + vz * m8 + cam_z
            if near_clip < rz < far_clip:
                rx = vx * m0 + vy * m1 + vz * m2
                ry = vx * m3 + vy * m4 + vz * m5
                proj_v[i] = (rx * sx_f / rz + half_w, half_h - ry * sy_f / rz, rz)

        for f in mesh.faces:
            pts = [proj_v[idx] for idx in f]
            if len(pts) < 3 or any(p is None for p in pts):
                continue

            # ── Frustum side culling ────────────────────────────────────
            if (all(p[0] < 0 for p in pts) or all(p[0] > W for p in pts) or
                    all(p[1] < 0 for p in pts) or all(p[1] > H for p in pts)):
                continue

            # ── Backface culling (screen-space cross product) ───────────
            if config.use_culling:
                p0, p1, p2 = pts[0], pts[1], pts[2]
                cross = ((p1[0] - p0[0]) * (p2[1] - p0[1]) -
                         (p1[1] - p0[1]) * (p2[0] - p0[0]))
                if not ((cross < 0) ^ camera.flip):
                    continue

            if config.use_zbuffer:
                canv.fill_depth(pts[0], pts[1], pts[2])
                if len(pts) > 3:
                    canv.fill_depth(pts[0], pts[2], pts[3])

            n = len(pts)
            for i in range(n):
                canv.draw_line(pts[i], pts[(i + 1) % n])

        return canv

    def render(self, stdscr, ctx: RenderContext, config: RenderConfig):
        """
        Draw one frame below the HUD row.

        Does NOT call stdscr.refresh(); the caller does that after drawing
        the HUD.
        """
        canv = self.rasterize(ctx, config)
        th, tw = stdscr.getmaxyx()

        stdscr.erase()
        if self.bg_attr:
            try:
                stdscr.bkgd(' ', self.bg_attr)
            except curses.error:
                pass

        # Split depth shading at the middle of the drawn depth range
        depths = [z for row in canv.cell_z for z in row if z < FAR_DEPTH]
        mid = (min(depths) + max(depths)) / 2 if depths else 0
        near_attr, far_attr = self.shades[0], self.shades[-1]
        to_char = render_cell_braille if config.use_braille else render_cell_ascii

        for y in range(min(th - 2, len(canv.grid))):
            row_grid = canv.grid[y]
            row_z = canv.cell_z[y]
            for x in range(min(tw - 1, len(row_grid))):
                mask = row_grid[x]
                if not mask:
                    continue
                attr = near_attr if row_z[x] <= mid else far_attr
                try:
                    stdscr.addstr(y + 1, x, to_char(mask), attr)
                except curses.error:
                    # Writing the bottom-right cell raises after the write
                    pass
