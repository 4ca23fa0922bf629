"""Color palette for Quizzer supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


def theme_for(dark_mode: bool) -> Theme:
    """Map the session's dark-mode flag to a theme."""
    return Theme.DARK if dark_mode else Theme.LIGHT


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the application."""

    # Text colors
    TEXT_PRIMARY = ThemeColors(light="#1B1B1B", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#666666", dark="#AAAAAA")

    # Background colors
    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_SECONDARY = ThemeColors(light="#F5F5F5", dark="#2D2D2D")

    # Accent colors
    ACCENT_PRIMARY = ThemeColors(light="#4F46E5", dark="#818CF8")

    # Answer feedback
    CORRECT = ThemeColors(light="#107C10", dark="#6FCF6F")
    INCORRECT = ThemeColors(light="#D13438", dark="#FF6B6B")
    WARNING = ThemeColors(light="#B7791F", dark="#FFC83D")

    # Borders and buttons
    BORDER_PRIMARY = ThemeColors(light="#D1D1D1", dark="#555555")
    BUTTON_PRIMARY_BG = ThemeColors(light="#4F46E5", dark="#818CF8")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F5F5F5", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E8E8E8", dark="#505050")
