#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/color.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import curses
import logging

logger = logging.getLogger(__name__)

# Each axis of the xterm 6x6x6 cube (indices 16-231)
_CUBE_VALUES = [0, 95, 135, 175, 215, 255]

_ANSI8 = [
    (0, 0, 0),       # 0  black
    (128, 0, 0),     # 1  red
    (0, 128, 0),     # 2  green
    (128, 128, 0),   # 3  yellow
    (0, 0, 128),     # 4  blue
    (128, 0, 128),   # 5  magenta
    (0, 128, 128),   # 6  cyan
    (192, 192, 192), # 7  white
]

# Pair ids: near shade, far shade, background
NEAR_PAIR, FAR_PAIR, BG_PAIR = 1, 2, 3


def parse_hex_color(hex_str):
    """
    Parse a hex color string to an (r, g, b) tuple.
    Accepts: '#RRGGBB' or 'RRGGBB' (case-insensitive).
    Returns: (r, g, b) tuple with values 0-255, or None on failure.
    """
    if hex_str is None:
        return None
    val = str(hex_str).strip().lstrip('#')
    if len(val) != 6:
        return None
    try:
        return (int(val[0:2], 16), int(val[2:4], 16), int(val[4:6], 16))
    except ValueError:
        return None


def blend(color_a, color_b, t: float):
    """Linear mix of two RGB tuples, t=0 gives color_a."""
    return tuple(int(round(a + (b - a) * t)) for a, b in zip(color_a, color_b))


def nearest_xterm(rgb) -> int:
    """Nearest xterm-256 index, searching the color cube and grayscale ramp."""
    r, g, b = rgb

    def axis(v):
        return min(range(6), key=lambda i: abs(v - _CUBE_VALUES[i]))

    ri, gi, bi = axis(r), axis(g), axis(b)
    cube_idx = 16 + ri * 36 + gi * 6 + bi
    cube_dist = ((r - _CUBE_VALUES[ri]) ** 2 + (g - _CUBE_VALUES[gi]) ** 2
                 + (b - _CUBE_VALUES[bi]) ** 2)

    gray_step = max(0, min(23, ((r + g + b) // 3 - 8 + 5) // 10))
    gv = 8 + gray_step * 10
    gray_dist = (r - gv) ** 2 + (g - gv) ** 2 + (b - gv) ** 2

    return 232 + gray_step if gray_dist < cube_dist else cube_idx


def nearest_ansi8(rgb) -> int:
    r, g, b = rgb
    return min(range(8), key=lambda i: (r - _ANSI8[i][0]) ** 2
               + (g - _ANSI8[i][1]) ** 2 + (b - _ANSI8[i][2]) ** 2)


def init_palette(config, obj_rgb=None, bg_rgb=None):
    """
    Set up curses color pairs for the object and background.

    Returns ``(shades, bg_attr)``: attributes for near and far edges, and the
    attribute used to fill the background.  Must run after curses started.
    Falls back to plain attributes when the terminal has no color.
    """
    plain = ([curses.A_BOLD, curses.A_NORMAL], curses.A_NORMAL)
    if not config.use_color:
        return plain
    try:
        if not curses.has_colors():
            return plain
        curses.start_color()
        try:
            curses.use_default_colors()
        except curses.error:
            pass

        obj_rgb = obj_rgb or (0, 255, 0)
        far_rgb = blend(obj_rgb, bg_rgb or (0, 0, 0), 0.5)
        to_index = nearest_xterm if curses.COLORS >= 256 else nearest_ansi8
        bg_idx = to_index(bg_rgb) if bg_rgb is not None else -1

        curses.init_pair(NEAR_PAIR, to_index(obj_rgb), bg_idx)
        curses.init_pair(FAR_PAIR, to_index(far_rgb), bg_idx)
        curses.init_pair(BG_PAIR, 7 if bg_idx != 7 else 0, bg_idx)
        return ([curses.color_pair(NEAR_PAIR) | curses.A_BOLD, curses.color_pair(FAR_PAIR)],
                curses.color_pair(BG_PAIR))
    except curses.error as e:
        logger.warning("Color setup failed, using monochrome: %s", e)
        return plain
