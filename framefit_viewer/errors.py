#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/errors.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#


class LoadError(RuntimeError):
    """A model or font resource could not be fetched or built."""


class MeshLoadError(LoadError):
    """OBJ data is unreadable or references vertices it does not define."""


class FontError(LoadError):
    """Typeface data is malformed or lacks a glyph it is asked to draw."""


class LoadCancelled(LoadError):
    """The load was cancelled before it finished."""
