"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to the 256-color cube if unsupported.
- Disabled when the output stream is not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or a .env file in the
  working directory.

Nothing is resolved at import time: a Theme is built from an explicit
environment mapping and stream, then passed to whatever renders.
"""
from __future__ import annotations
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Mapping, Optional, Tuple

from dotenv import dotenv_values

TRUTHY = {"1", "true", "yes", "on"}
HEX_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")

# Default palette
HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_PENDING_DEFAULT = '#5C9DFF'
HEX_DONE_DEFAULT = '#4CB944'
HEX_ALERT_DEFAULT = '#E5484D'

PALETTE_KEYS = ('TODO_PRIMARY', 'TODO_PENDING', 'TODO_DONE', 'TODO_ALERT')

RESET_CODE = "\033[0m"
BOLD_CODE = "\033[1m"
DIM_CODE = "\033[2m"


def _hex_to_rgb(hex_code: str) -> Tuple[int, int, int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _fg_truecolor(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"


def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"


def _valid_hex(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    if not HEX_RE.match(value):
        return None
    return '#' + value.lstrip('#')


def load_palette(environ: Mapping[str, str], env_file: Optional[Path] = None) -> dict[str, str]:
    """Resolve palette hex values.

    Priority: real environment > .env file > default. Invalid hex values
    are skipped at every level.
    """
    file_values: Mapping[str, Optional[str]] = {}
    if env_file is not None and env_file.is_file():
        file_values = dotenv_values(env_file)
    defaults = {
        'TODO_PRIMARY': HEX_PRIMARY_DEFAULT,
        'TODO_PENDING': HEX_PENDING_DEFAULT,
        'TODO_DONE': HEX_DONE_DEFAULT,
        'TODO_ALERT': HEX_ALERT_DEFAULT,
    }
    palette = {}
    for key in PALETTE_KEYS:
        palette[key] = (_valid_hex(environ.get(key))
                        or _valid_hex(file_values.get(key))
                        or defaults[key])
    return palette


@dataclass(frozen=True)
class Theme:
    enabled: bool = False
    truecolor: bool = False
    primary: str = HEX_PRIMARY_DEFAULT
    pending: str = HEX_PENDING_DEFAULT
    done: str = HEX_DONE_DEFAULT
    alert: str = HEX_ALERT_DEFAULT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 stream: Optional[IO[str]] = None,
                 force: Optional[bool] = None,
                 env_file: Optional[Path] = Path('.env')) -> Theme:
        """Build a theme from environment variables and the target stream.

        ``force`` (the CLI's --color/--no-color) wins over detection.
        """
        environ = os.environ if environ is None else environ
        if force is not None:
            enabled = force
        else:
            forced = environ.get("FORCE_COLOR", "").lower() in TRUTHY
            is_tty = bool(stream is not None and hasattr(stream, 'isatty') and stream.isatty())
            enabled = (forced or is_tty) and environ.get("NO_COLOR") is None
        colorterm = environ.get("COLORTERM", "").lower()
        truecolor = enabled and any(tok in colorterm for tok in ("truecolor", "24bit"))
        palette = load_palette(environ, env_file)
        return cls(
            enabled=enabled,
            truecolor=truecolor,
            primary=palette['TODO_PRIMARY'],
            pending=palette['TODO_PENDING'],
            done=palette['TODO_DONE'],
            alert=palette['TODO_ALERT'],
        )

    def fg(self, hex_code: str) -> str:
        """ANSI foreground sequence for a hex color (empty when disabled)."""
        if not self.enabled:
            return ''
        r, g, b = _hex_to_rgb(hex_code)
        if self.truecolor:
            return _fg_truecolor(r, g, b)
        return _fg_256(r, g, b)

    def color(self, text: str, *styles: str) -> str:
        """Apply ANSI styles to a given text."""
        if not self.enabled or not styles:
            return text
        return ''.join(styles) + text + RESET_CODE

    @property
    def bold(self) -> str:
        return BOLD_CODE if self.enabled else ''

    @property
    def dim(self) -> str:
        return DIM_CODE if self.enabled else ''

    # role helpers used by the table renderer
    def header(self, text: str) -> str:
        return self.color(text, self.fg(self.primary), self.bold)

    def frame(self, text: str) -> str:
        return self.color(text, self.fg(self.primary))

    def ok(self, text: str) -> str:
        return self.color(text, self.fg(self.done))

    def todo(self, text: str) -> str:
        return self.color(text, self.fg(self.pending))

    def warn(self, text: str) -> str:
        return self.color(text, self.fg(self.alert))

    def muted(self, text: str) -> str:
        return self.color(text, self.dim, self.fg(self.primary))


PLAIN = Theme()
