"""Centralized styles and font definitions for the application."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        """Window-wide stylesheet shared by the login, library, creator and player pages."""
        text = ColorPalette.TEXT_PRIMARY.get(theme)
        muted = ColorPalette.TEXT_SECONDARY.get(theme)
        base = ColorPalette.BACKGROUND_PRIMARY.get(theme)
        panel = ColorPalette.BACKGROUND_SECONDARY.get(theme)
        border = ColorPalette.BORDER_PRIMARY.get(theme)
        accent = ColorPalette.BUTTON_PRIMARY_BG.get(theme)
        accent_text = ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)
        return f"""
            QMainWindow, QWidget {{
                background-color: {base};
                color: {text};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                border: 1px solid {border};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{ background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)}; }}
            QPushButton:disabled {{ color: {muted}; }}
            QPushButton:checked {{ background-color: {accent}; color: {accent_text}; border-color: {accent}; }}
            QLineEdit, QPlainTextEdit, QSpinBox, QComboBox {{
                border: 1px solid {border};
                border-radius: 4px;
                padding: 4px;
            }}
            QLineEdit:focus, QPlainTextEdit:focus {{ border-color: {accent}; }}
            QListWidget, QTabWidget::pane {{
                background-color: {panel};
                border: 1px solid {border};
                border-radius: 4px;
            }}
            QListWidget::item:selected {{ background-color: {accent}; color: {accent_text}; }}
            QTabBar::tab {{ padding: 6px 14px; color: {muted}; }}
            QTabBar::tab:selected {{ color: {text}; border-bottom: 2px solid {accent}; }}
            QGroupBox {{
                border: 1px solid {border};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
            QGroupBox::title {{ subcontrol-origin: margin; left: 10px; padding: 0 3px; }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_countdown_style(theme: Theme = Theme.LIGHT) -> str:
        return f"font-size: 64pt; font-weight: bold; color: {ColorPalette.ACCENT_PRIMARY.get(theme)};"

    @staticmethod
    def get_timer_style(theme: Theme = Theme.LIGHT, warning: bool = False) -> str:
        color = ColorPalette.WARNING if warning else ColorPalette.TEXT_SECONDARY
        return f"font-size: 14pt; font-weight: bold; color: {color.get(theme)};"

    @staticmethod
    def get_option_style(theme: Theme = Theme.LIGHT, correct: bool | None = None) -> str:
        """Style for an option button; ``correct`` colours it after the reveal."""
        if correct is None:
            background = ColorPalette.BUTTON_SECONDARY_BG.get(theme)
            text = ColorPalette.TEXT_PRIMARY.get(theme)
        else:
            background = (ColorPalette.CORRECT if correct else ColorPalette.INCORRECT).get(theme)
            text = "#FFFFFF"
        return (
            f"QPushButton {{ background-color: {background}; color: {text}; "
            "text-align: left; padding: 12px; font-size: 12pt; }"
        )

    @staticmethod
    def get_feedback_style(theme: Theme = Theme.LIGHT, correct: bool = True) -> str:
        color = ColorPalette.CORRECT if correct else ColorPalette.INCORRECT
        return f"font-size: 14pt; font-weight: bold; color: {color.get(theme)};"
