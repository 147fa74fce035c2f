#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/config.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#

import os
from dataclasses import dataclass


@dataclass
class RenderConfig:
    """Configuration for the rendering pipeline."""
    use_color: bool = True
    use_braille: bool = True
    use_zbuffer: bool = True
    use_culling: bool = True
    fov: float = 75.0
    near_clip: float = 0.1
    far_plane: float = 1000.0

    def __post_init__(self):
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"fov must be in (0, 180), got {self.fov}")
        if self.near_clip <= 0.0:
            raise ValueError(f"near_clip must be positive, got {self.near_clip}")
        if self.far_plane <= self.near_clip:
            raise ValueError("far_plane must be beyond near_clip")

    @classmethod
    def detect_terminal(cls, **overrides) -> 'RenderConfig':
        """
        Autodetect terminal capabilities and return a default config.
        Checks TERM and LANG environment variables.
        """
        term = os.environ.get('TERM', '').lower()
        lang = os.environ.get('LANG', '').lower()

        is_dumb = term in ('dumb', 'unknown')
        is_linux_console = term == 'linux'
        supports_utf8 = 'utf-8' in lang or 'utf8' in lang

        settings = dict(
            use_color=not is_dumb,
            # Linux console font often lacks braille, so default off there
            use_braille=supports_utf8 and not is_linux_console,
        )
        settings.update(overrides)
        return cls(**settings)


@dataclass(frozen=True)
class ViewerProfile:
    """What differs between showing a model and showing text."""
    name: str
    coverage: float
    orbit_controls: bool = True

    def with_coverage(self, coverage: float) -> 'ViewerProfile':
        if not 0.0 < coverage <= 1.0:
            raise ValueError(f"coverage must be in (0, 1], got {coverage}")
        return ViewerProfile(self.name, coverage, self.orbit_controls)


PROFILES = {
    'model': ViewerProfile('model', coverage=0.90, orbit_controls=True),
    'text': ViewerProfile('text', coverage=0.80, orbit_controls=False),
}
