#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/viewer.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import curses
import logging
import time

from .camera import Camera
from .color import parse_hex_color
from .config import PROFILES, RenderConfig
from .context import RenderContext, Viewport
from .framing import FrameFitResult, fit_context
from .loader import load_model, load_text
from .logging_config import LOGGER_NAME, attach_hud_handler
from .mesh import Mesh
from .renderer import Renderer
from .scene import Scene
from .text import build_text_mesh

logger = logging.getLogger(__name__)


def build_config(args) -> RenderConfig:
    """RenderConfig from terminal detection plus command-line overrides."""
    config = RenderConfig.detect_terminal(fov=args.fov, near_clip=args.near,
                                          far_plane=args.far)
    if args.no_color:
        config.use_color = False
    if args.ascii:
        config.use_braille = False
    if args.no_zbuffer:
        config.use_zbuffer = False
    if args.no_cull:
        config.use_culling = False
    return config


def select_profile(args):
    profile = PROFILES['text' if args.text is not None else 'model']
    if args.coverage is not None:
        profile = profile.with_coverage(args.coverage)
    return profile


def start_load(args):
    """LoadTask for what the arguments ask to show, or None for the demo cube."""
    if args.text is not None:
        return load_text(args.text, font_source=args.font)
    if args.model:
        return load_model(args.model)
    return None


class ViewerApp:
    """
    Interactive viewer: render loop, input, HUD, and the two framing
    triggers (object ready, viewport resized).
    """

    def __init__(self, stdscr, args):
        self.stdscr = stdscr
        self.args = args
        self.running = True

        # ── Curses setup ────────────────────────────────────────────────
        curses.curs_set(0)
        stdscr.nodelay(True)
        stdscr.keypad(True)

        self.config = build_config(args)
        self.profile = select_profile(args)

        renderer = Renderer()
        renderer.init_colors(self.config, parse_hex_color(args.obj_color),
                             parse_hex_color(args.bg_color))
        self.renderer = renderer

        rows, cols = stdscr.getmaxyx()
        camera = Camera(fov=self.config.fov, near=self.config.near_clip,
                        far=self.config.far_plane)
        self.ctx = RenderContext(camera=camera,
                                 viewport=Viewport.from_terminal(rows, cols),
                                 scene=Scene())
        camera.aspect = self.ctx.viewport.aspect
        camera.update_projection_matrix()

        self.hud_log = attach_hud_handler()
        self.last_fit = FrameFitResult()

        self.load_task = start_load(args)
        if self.load_task is None:
            self.on_object_ready(Mesh.cube())

        # ── Frame counter ───────────────────────────────────────────────
        self.frame_count = 0
        self.fps = 0
        self.last_fps_time = time.time()

    # ────────────────────────────────────────────────────────────────────
    # Framing triggers
    # ────────────────────────────────────────────────────────────────────
    def on_object_ready(self, mesh: Mesh):
        if mesh.is_empty():
            logger.warning("Loaded geometry is empty, showing the demo cube")
            mesh = Mesh.cube()
        self.ctx.scene.set_object(mesh)
        self.refit(reset_view=True)

    def on_load_failed(self, error):
        # Keep something on screen: block-font text or the demo cube
        logger.warning("Showing fallback geometry: %s", error)
        if self.args.text is not None:
            self.on_object_ready(build_text_mesh(self.args.text))
        else:
            self.on_object_ready(Mesh.cube())

    def refit(self, reset_view: bool = False):
        self.last_fit = fit_context(self.ctx, self.profile.coverage, reset_view)
        return self.last_fit

    def check_resize(self):
        rows, cols = self.stdscr.getmaxyx()
        viewport = Viewport.from_terminal(rows, cols)
        if viewport != self.ctx.viewport:
            logger.debug("Viewport resized to %dx%d", viewport.width, viewport.height)
            self.ctx.viewport = viewport
            if viewport.is_drawable():
                self.refit()

    def poll_load(self):
        task = self.load_task
        if task is None:
            return
        mesh = task.poll()
        if mesh is not None:
            self.load_task = None
            self.on_object_ready(mesh)
        elif task.error is not None:
            self.load_task = None
            self.on_load_failed(task.error)

    # ────────────────────────────────────────────────────────────────────
    # Input
    # ────────────────────────────────────────────────────────────────────
    def handle_input(self):
        try:
            key = self.stdscr.getch()
        except curses.error:
            key = -1

        if key == -1:
            return

        camera = self.ctx.camera
        config = self.config
        orbit = self.profile.orbit_controls

        if key == ord('q'):
            self.running = False
        elif key == curses.KEY_RESIZE:
            self.check_resize()
        elif orbit and key == curses.KEY_UP:
            camera.orbit(0.0, 0.1)
        elif orbit and key == curses.KEY_DOWN:
            camera.orbit(0.0, -0.1)
        elif orbit and key == curses.KEY_RIGHT:
            camera.orbit(0.1, 0.0)
        elif orbit and key == curses.KEY_LEFT:
            camera.orbit(-0.1, 0.0)
        elif key in (ord('='), ord('+')):
            camera.zoom(-0.5)
        elif key == ord('-'):
            camera.zoom(0.5)
        elif key == ord('['):
            camera.adjust_fov(-5)
            self.refit()
        elif key == ord(']'):
            camera.adjust_fov(5)
            self.refit()
        elif key == ord('r'):
            self.refit(reset_view=True)
        elif key == ord('f'):
            camera.flip = not camera.flip
        # Runtime toggles
        elif key == ord('c'):
            config.use_color = not config.use_color
        elif key == ord('b'):
            config.use_braille = not config.use_braille
        elif key == ord('z'):
            config.use_zbuffer = not config.use_zbuffer

    # ────────────────────────────────────────────────────────────────────
    # HUD
    # ────────────────────────────────────────────────────────────────────
    def hud_text(self, ms: float) -> str:
        obj = self.ctx.scene.object
        if obj is None:
            geo = "loading" if self.load_task is not None else "empty"
        else:
            geo = f"V:{len(obj.mesh.vertices)} F:{len(obj.mesh.faces)}"

        fit = self.last_fit
        if fit.skipped:
            fitstr = "FIT:--"
        else:
            fitstr = (f"FIT:{fit.branch} {fit.distance:.2f}"
                      f"{'!' if fit.clamped else ''}")
        camera = self.ctx.camera
        hdr = (f" {self.profile.name.upper()} {self.profile.coverage:.0%}"
               f" | {geo}"
               f" | {fitstr} D:{camera.distance:.2f} FOV:{camera.fov:.0f}"
               f" | FPS:{self.fps} {ms:.1f}ms ")
        if self.hud_log.last_message:
            hdr += f"| {self.hud_log.last_message} "
        return hdr

    # ────────────────────────────────────────────────────────────────────
    # Main loop
    # ────────────────────────────────────────────────────────────────────
    def run(self):
        try:
            while self.running:
                start_time = time.time()

                self.handle_input()
                self.check_resize()
                self.poll_load()

                # Render frame (fills canvas, outputs to stdscr, does NOT refresh)
                self.renderer.render(self.stdscr, self.ctx, self.config)

                th, tw = self.stdscr.getmaxyx()
                self.frame_count += 1
                now = time.time()
                if now - self.last_fps_time >= 1.0:
                    self.fps = self.frame_count
                    self.frame_count = 0
                    self.last_fps_time = now

                hdr = self.hud_text((now - start_time) * 1000)
                try:
                    self.stdscr.addstr(0, 0, hdr[:max(0, tw - 1)].center(tw - 1, '='),
                                       curses.A_BOLD)
                except curses.error:
                    pass

                self.stdscr.refresh()
        finally:
            if self.load_task is not None:
                self.load_task.cancel()
            logging.getLogger(LOGGER_NAME).removeHandler(self.hud_log)


def main(stdscr, args):
    """Entry point called from curses.wrapper."""
    app = ViewerApp(stdscr, args)
    app.run()
