"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to the 256-color cube if unsupported.
- Styling is emitted through click, so ``click.echo`` strips it when stdout
  is not a TTY; ``Theme.echo_color`` carries NO_COLOR / FORCE_COLOR.
- Palette comes from Settings (env or .env overrides already applied).
"""
from __future__ import annotations
from typing import Mapping, Optional, Tuple, Union

import click

from config import PALETTE_DEFAULTS

Color = Union[int, Tuple[int, int, int]]


def _hex_to_rgb(hex_code: str) -> tuple[int, int, int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _rgb_to_256(r: int, g: int, b: int) -> int:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    return 16 + 36 * r6 + 6 * g6 + b6


class Theme:
    def __init__(self, palette: Optional[Mapping[str, str]] = None,
                 truecolor: bool = False, color: Optional[bool] = None):
        self.truecolor = truecolor
        # passed straight to click.echo(color=...)
        self.echo_color = color
        merged = dict(PALETTE_DEFAULTS)
        merged.update(palette or {})
        self._fg = {name: self._resolve(hex_code) for name, hex_code in merged.items()}

    @classmethod
    def from_settings(cls, settings) -> "Theme":
        return cls(settings.palette, truecolor=settings.truecolor, color=settings.color)

    def _resolve(self, hex_code: str) -> Color:
        rgb = _hex_to_rgb(hex_code)
        if self.truecolor:
            return rgb
        return _rgb_to_256(*rgb)

    def style(self, text: str, name: Optional[str] = None, bold: bool = False) -> str:
        """Apply palette entry ``name`` (and optional weight) to text."""
        if self.echo_color is False:
            return text
        return click.style(text, fg=self._fg[name] if name else None,
                           bold=bold or None)

    @staticmethod
    def status_key(completed: bool) -> str:
        """Palette entry used for a task's status."""
        return 'done' if completed else 'pending'
