import pytest

from framefit_viewer.canvas import Canvas, render_cell_ascii, render_cell_braille
from framefit_viewer.config import RenderConfig
from framefit_viewer.context import RenderContext, Viewport
from framefit_viewer.framing import fit_context
from framefit_viewer.mesh import Mesh
from framefit_viewer.renderer import Renderer
from framefit_viewer.text import build_text_mesh


class FakeScreen:
    """Just enough of a curses window for Renderer.render."""

    def __init__(self, rows, cols):
        self.rows, self.cols = rows, cols
        self.cells = {}
        self.erased = 0

    def getmaxyx(self):
        return self.rows, self.cols

    def erase(self):
        self.erased += 1
        self.cells.clear()

    def bkgd(self, ch, attr):
        pass

    def addstr(self, y, x, text, attr=0):
        self.cells[(y, x)] = text


def lit_extent(canv):
    xs, ys = [], []
    for y in range(canv.h):
        for x in range(canv.w):
            if canv.z_buffer[y][x] < (1 << 30) and canv.grid[y >> 2][x >> 1] & (
                    1 << ((y & 3) + (x & 1) * 4)):
                xs.append(x)
                ys.append(y)
    return min(xs), max(xs), min(ys), max(ys)


def framed_context(mesh, width=160, height=80, coverage=0.9):
    ctx = RenderContext(viewport=Viewport(width, height))
    ctx.scene.set_object(mesh)
    fit_context(ctx, coverage, reset_view=True)
    return ctx


def config(**kw):
    return RenderConfig(use_color=False, **kw)


def test_cube_fills_coverage_of_height():
    ctx = framed_context(Mesh.cube())
    canv = Renderer().rasterize(ctx, config())

    x0, x1, y0, y1 = lit_extent(canv)
    # Viewport is twice as wide as the cube, so height binds
    assert 0.85 * 80 <= y1 - y0 <= 0.95 * 80
    assert 0 < x0 and x1 < 160


def test_wide_box_fills_coverage_of_width():
    ctx = framed_context(Mesh.box((0, 0, 0), (8, 1, 1)), width=100, height=100)
    canv = Renderer().rasterize(ctx, config())

    x0, x1, y0, y1 = lit_extent(canv)
    assert 0.85 * 100 <= x1 - x0 <= 0.95 * 100
    assert y1 - y0 < 30


def test_empty_scene_draws_nothing():
    ctx = RenderContext(viewport=Viewport(40, 40))
    canv = Renderer().rasterize(ctx, config())
    assert not any(any(row) for row in canv.grid)


def test_backface_culling_draws_fewer_dots_when_orbiting():
    ctx = framed_context(Mesh.cube())
    ctx.camera.orbit(0.5, 0.4)
    renderer = Renderer()

    def dots(cfg):
        canv = renderer.rasterize(ctx, cfg)
        return sum(bin(m).count('1') for row in canv.grid for m in row)

    assert 0 < dots(config(use_culling=True, use_zbuffer=False)) < dots(
        config(use_culling=False, use_zbuffer=False))


def test_text_front_caps_are_visible():
    ctx = framed_context(build_text_mesh("HI"), width=100, height=100, coverage=0.8)
    canv = Renderer().rasterize(ctx, config())
    x0, x1, _, _ = lit_extent(canv)
    # Text is wider than the square viewport, so width binds
    assert 0.75 * 100 <= x1 - x0 <= 0.85 * 100


def test_render_writes_cells_below_hud_row():
    ctx = framed_context(Mesh.cube(), width=(81 - 1) * 2, height=(42 - 2) * 4)
    screen = FakeScreen(rows=42, cols=81)

    Renderer().render(screen, ctx, config())

    assert screen.erased == 1
    assert screen.cells
    assert all(y >= 1 for y, _ in screen.cells)
    assert all(ord(ch) >= 0x2800 for ch in screen.cells.values())


def test_render_ascii_mode():
    ctx = framed_context(Mesh.cube(), width=80, height=80)
    screen = FakeScreen(rows=22, cols=41)
    Renderer().render(screen, ctx, config(use_braille=False))
    assert set(screen.cells.values()) <= set(" .:-=+*#%@")


def test_canvas_depth_test_keeps_nearest():
    canv = Canvas(4, 4)
    canv.set_pixel(1, 1, 500)
    canv.set_pixel(1, 1, 900)
    assert canv.z_buffer[1][1] == 500
    assert canv.cell_z[0][0] == 500


def test_depth_prepass_hides_lines_behind():
    canv = Canvas(20, 20)
    canv.fill_depth((0, 0, 1.0), (19, 0, 1.0), (0, 19, 1.0))
    canv.draw_line((2, 2, 5.0), (8, 2, 5.0))
    assert not any(any(row) for row in canv.grid)
    canv.draw_line((2, 4, 0.5), (8, 4, 0.5))
    assert any(any(row) for row in canv.grid)


@pytest.mark.parametrize("mask,expected", [(0, ' '), (0xFF, chr(0x28FF)), (0x01, chr(0x2801))])
def test_braille_cells(mask, expected):
    assert render_cell_braille(mask) == expected


def test_ascii_cells_follow_density():
    assert render_cell_ascii(0) == ' '
    assert render_cell_ascii(0x01) == '.'
    assert render_cell_ascii(0xFF) == '%'
