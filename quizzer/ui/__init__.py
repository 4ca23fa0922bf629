"""Qt UI components for the Quizzer desktop client."""

from .dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    confirm_delete_quiz,
    confirm_leave_quiz,
    show_error,
    show_info,
    show_warning,
)
from .main_window import AppMode, MainWindow
from .qt_scheduler import QtScheduler
from .question_renderer import render_question, render_question_with_options

__all__ = [
    "AppMode",
    "MainWindow",
    "QtScheduler",
    "check_unsaved_changes",
    "confirm_delete_question",
    "confirm_delete_quiz",
    "confirm_leave_quiz",
    "show_error",
    "show_info",
    "show_warning",
    "render_question",
    "render_question_with_options",
]
