"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, footer)
- Dark/light mode configuration

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

from .config import THEME_DARK, THEME_LIGHT

# Dark slate palette with a warm accent for assistant output
OLLACHAT_DARK = Theme(
    name=THEME_DARK,
    primary="#7aa2f7",      # Blue - user messages, focus
    secondary="#bb9af7",    # Violet - assistant messages
    accent="#e0af68",       # Amber - thinking trace
    foreground="#c0caf5",
    background="#16161e",
    success="#9ece6a",
    warning="#ff9e64",
    error="#f7768e",
    surface="#1a1b26",
    panel="#1f2335",
    dark=True,
    variables={
        "border": "#3b4261",
        "border-blurred": "#292e42",
        "scrollbar": "#292e42",
        "scrollbar-hover": "#3b4261",
        "scrollbar-active": "#7aa2f7",
        "scrollbar-background": "#1f2335",
        "footer-key-foreground": "#e0af68",
        "text-muted": "#565f89",
        "input-selection-background": "#7aa2f7 30%",
    },
)

# Light counterpart, toggled with Ctrl+T
OLLACHAT_LIGHT = Theme(
    name=THEME_LIGHT,
    primary="#2e7de9",
    secondary="#9854f1",
    accent="#8c6c3e",
    foreground="#3760bf",
    background="#e1e2e7",
    success="#587539",
    warning="#b15c00",
    error="#f52a65",
    surface="#e9e9ed",
    panel="#d5d6db",
    dark=False,
    variables={
        "border": "#a8aecb",
        "border-blurred": "#c4c8da",
        "footer-key-foreground": "#8c6c3e",
        "text-muted": "#848cb5",
        "input-selection-background": "#2e7de9 25%",
    },
)
