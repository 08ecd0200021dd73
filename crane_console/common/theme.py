from __future__ import annotations

import logging
from typing import Literal, cast, get_args

from nicegui import app, ui

ThemeMode = Literal["light", "dark", "system"]


def get_palette(mode: ThemeMode) -> dict[str, str]:
    """Return palette tokens for the given mode."""
    if mode == "dark":
        return {
            "primary": "#F59E0B",  # crane amber
            "primary_hover": "#B45309",
            "background": "#111418",
            "surface": "#1B2027",
            "text": "#E5E7EB",
            "muted": "#9CA3AF",
            "accent": "#22D3EE",
            "positive": "#21BA45",
            "negative": "#DB2828",
            "info": "#31CCEC",
            "warning": "#F2C037",
        }
    # light
    return {
        "primary": "#D97706",
        "primary_hover": "#92400E",
        "background": "#F3F4F6",
        "surface": "#FFFFFF",
        "text": "#111827",
        "muted": "#6B7280",
        "accent": "#0891B2",
        "positive": "#21BA45",
        "negative": "#DB2828",
        "info": "#31CCEC",
        "warning": "#F2C037",
    }


def _inject_css_vars(p: dict[str, str]) -> None:
    ui.add_css(
        f"""
:root {{
  --crane-primary: {p["primary"]};
  --crane-primary-hover: {p["primary_hover"]};
  --crane-bg: {p["background"]};
  --crane-surface: {p["surface"]};
  --crane-text: {p["text"]};
  --crane-muted: {p["muted"]};
}}

body, .q-page {{ background: var(--crane-bg); color: var(--crane-text); }}
.q-header, .q-card {{ background: var(--crane-surface); color: var(--crane-text); }}
.q-btn.bg-primary:hover {{ background: var(--crane-primary-hover) !important; }}
.axis-readout {{ font-family: ui-monospace, monospace; font-weight: 700; color: var(--crane-primary); }}
"""
    )


def apply_theme(mode: ThemeMode) -> None:
    """Set Quasar colors and dark mode, then inject the CSS variables."""
    choice: ThemeMode = mode
    if mode == "system":
        # Quasar resolves "auto" from the browser preference; palette falls back to dark
        ui.dark_mode(None)
        choice = "dark"
        logging.debug("System theme: dark palette, browser-resolved mode")
    elif mode == "dark":
        ui.dark_mode(True)
    else:
        ui.dark_mode(False)

    pal = get_palette(choice)
    ui.colors(
        primary=pal["primary"],
        secondary=pal["primary_hover"],
        accent=pal["accent"],
        positive=pal["positive"],
        negative=pal["negative"],
        info=pal["info"],
        warning=pal["warning"],
    )
    _inject_css_vars(pal)


def set_theme(mode: ThemeMode) -> ThemeMode:
    """Persist and apply theme mode."""
    app.storage.general["theme_mode"] = mode
    apply_theme(mode)
    return mode


def get_theme() -> ThemeMode:
    """Return the requested mode ('light'/'dark'/'system')."""
    mode = app.storage.general.get("theme_mode", "system")
    if isinstance(mode, str) and mode in get_args(ThemeMode):
        return cast("ThemeMode", mode)
    return cast("ThemeMode", "system")
