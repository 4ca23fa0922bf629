"""Styling module for the Quizzer desktop client."""

from .color_palette import ColorPalette, Theme, theme_for

__all__ = ["ColorPalette", "Theme", "theme_for"]
