#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/cli.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import argparse
import curses
import logging
import sys
import traceback

from .bounds import compute_bounds
from .camera import Camera
from .errors import LoadError
from .framing import fit_camera
from .logging_config import setup_logging
from .mesh import Mesh
from .scene import Scene
from .viewer import build_config, main as viewer_main, select_profile, start_load


def build_parser() -> argparse.ArgumentParser:
    epilog = """\
examples:
  %(prog)s                                         Demo cube (no model needed)
  %(prog)s cobra.obj                               Frame an OBJ model
  %(prog)s https://example.com/model.obj           Fetch and frame a model
  %(prog)s --text "Cory Richard"                   Extruded text, block font
  %(prog)s --text Hello --font helvetiker_regular.typeface.json
  %(prog)s cobra.obj --coverage 0.5 --fov 50       Smaller object, narrower lens
  %(prog)s cobra.obj --print-fit --aspect 1.777    Print the fit and exit
"""
    parser = argparse.ArgumentParser(
        description="Terminal wireframe viewer that frames its object automatically",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("model", nargs='?', help="Path or URL of an .obj file")
    parser.add_argument("--text", default=None,
                        help="Show this text instead of a model")
    parser.add_argument("--font", default=None,
                        help="Path or URL of a typeface JSON font for --text")
    parser.add_argument("--coverage", type=float, default=None,
                        help="Fraction of the frame the object fills "
                             "(default: 0.90 for models, 0.80 for text)")
    parser.add_argument("--fov", type=float, default=75.0,
                        help="Vertical field of view in degrees (default: 75)")
    parser.add_argument("--near", type=float, default=0.1,
                        help="Near clipping plane (default: 0.1)")
    parser.add_argument("--far", type=float, default=1000.0,
                        help="Far clipping plane (default: 1000)")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable color output")
    parser.add_argument("--ascii", action="store_true",
                        help="Use ASCII characters instead of Braille")
    parser.add_argument("--no-zbuffer", action="store_true",
                        help="Disable Z-buffering")
    parser.add_argument("--no-cull", action="store_true",
                        help="Disable backface culling")
    parser.add_argument("--obj-color", default="#FFFFFF",
                        help="Wireframe color in hex #RRGGBB (default: #FFFFFF)")
    parser.add_argument("--bg-color", default="#000000",
                        help="Background color in hex #RRGGBB (default: #000000)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None,
                        help="Write log records to this file")
    parser.add_argument("--print-fit", action="store_true",
                        help="Load the object, print the computed fit and exit")
    parser.add_argument("--aspect", type=float, default=16 / 9,
                        help="Viewport aspect for --print-fit (default: 1.778)")
    return parser


def print_fit(args, out=None) -> int:
    """Load synchronously, fit a camera with ``args.aspect`` and report it."""
    out = out or sys.stdout
    config = build_config(args)
    profile = select_profile(args)

    task = start_load(args)
    mesh = Mesh.cube() if task is None else task.wait()
    if task is not None and task.error is not None:
        print(f"error: {task.error}", file=sys.stderr)
        return 1

    scene = Scene()
    scene.set_object(mesh)
    bounds = compute_bounds(scene.object)

    camera = Camera(fov=config.fov, aspect=args.aspect, near=config.near_clip,
                    far=config.far_plane)
    result = fit_camera(camera, bounds, profile.coverage, reset_view=True)

    size = bounds.size
    print(f"profile:  {profile.name} ({profile.coverage:.2f})", file=out)
    print(f"size:     {size.x:.4f} x {size.y:.4f} x {size.z:.4f}", file=out)
    if result.skipped:
        print("fit:      skipped (empty object)", file=out)
        return 0
    print(f"branch:   {result.branch}", file=out)
    print(f"distance: {result.distance:.4f}", file=out)
    print(f"clamped:  {'yes' if result.clamped else 'no'}", file=out)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = getattr(logging, args.log_level)

    if args.print_fit:
        setup_logging(level, args.log_file)
        try:
            return print_fit(args)
        except (LoadError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

    # curses owns the terminal, so no console logging while it runs
    setup_logging(level, args.log_file, console=False)
    try:
        curses.wrapper(lambda s: viewer_main(s, args))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        # curses.wrapper has already restored the terminal
        print(f"Error: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1
    return 0
