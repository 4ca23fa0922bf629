"""Lists the user's quizzes, public quizzes and play history."""

from __future__ import annotations

from collections.abc import Callable
import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from quizzer.client.api_client import QuizApiClient
from quizzer.constants.ui_constants import (
    LIBRARY_DELETE_BUTTON,
    LIBRARY_EDIT_BUTTON,
    LIBRARY_EMPTY_MESSAGE,
    LIBRARY_PLAY_BUTTON,
    LIBRARY_REFRESH_BUTTON,
    LIBRARY_SHARE_BUTTON,
    LIBRARY_TAB_HISTORY,
    LIBRARY_TAB_MINE,
    LIBRARY_TAB_PUBLIC,
    NO_QUIZ_SELECTED_MESSAGE,
)
from quizzer.core.errors import ApiError
from quizzer.core.models import QuizSummary
from quizzer.ui.dialog_helpers import ask_email, confirm_delete_quiz, show_error, show_info, show_warning

logger = logging.getLogger(__name__)


def _describe(summary: QuizSummary) -> str:
    parts = [summary.topic, f"{summary.question_count} questions"]
    if summary.is_public_attempt:
        parts.append("public")
    if summary.completed and summary.score is not None:
        parts.append(f"score {summary.score}/{summary.question_count}")
    elif summary.completed:
        parts.append("completed")
    if summary.created_at is not None:
        parts.append(summary.created_at.strftime("%Y-%m-%d"))
    return " · ".join(parts)


class LibraryPanel(QWidget):
    def __init__(
        self,
        api: QuizApiClient,
        on_play: Callable[[int], None],
        on_edit: Callable[[int], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.api = api
        self.on_play = on_play
        self.on_edit = on_edit

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.greeting_label = QLabel("", self)
        layout.addWidget(self.greeting_label)

        self.tabs = QTabWidget(self)
        self.my_list = QListWidget(self)
        self.public_list = QListWidget(self)
        self.history_list = QListWidget(self)
        self.tabs.addTab(self.my_list, LIBRARY_TAB_MINE)
        self.tabs.addTab(self.public_list, LIBRARY_TAB_PUBLIC)
        self.tabs.addTab(self.history_list, LIBRARY_TAB_HISTORY)
        self.tabs.currentChanged.connect(lambda _index: self._update_buttons())
        layout.addWidget(self.tabs, stretch=1)

        for quiz_list in (self.my_list, self.public_list, self.history_list):
            quiz_list.itemDoubleClicked.connect(lambda _item: self._handle_play())

        button_row = QHBoxLayout()
        self.play_button = QPushButton(LIBRARY_PLAY_BUTTON, self)
        self.play_button.clicked.connect(self._handle_play)
        button_row.addWidget(self.play_button)

        self.edit_button = QPushButton(LIBRARY_EDIT_BUTTON, self)
        self.edit_button.clicked.connect(self._handle_edit)
        button_row.addWidget(self.edit_button)

        self.delete_button = QPushButton(LIBRARY_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete)
        button_row.addWidget(self.delete_button)

        self.share_button = QPushButton(LIBRARY_SHARE_BUTTON, self)
        self.share_button.clicked.connect(self._handle_share)
        button_row.addWidget(self.share_button)

        button_row.addStretch()

        self.refresh_button = QPushButton(LIBRARY_REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self.refresh)
        button_row.addWidget(self.refresh_button)
        layout.addLayout(button_row)

        self._update_buttons()

    # --- Data ---

    def refresh(self) -> None:
        user = self.api.session.user
        self.greeting_label.setText(f"Signed in as {user.name} ({user.email})" if user else "")
        try:
            own = self.api.list_quizzes(exclude_public_attempts=True)
            public = self.api.list_public_quizzes()
            history = [item for item in self.api.list_quizzes() if item.completed]
        except ApiError as exc:
            logger.warning("Could not refresh library: %s", exc)
            show_error(self, "Library", f"Could not load quizzes: {exc}")
            return
        self._fill(self.my_list, own)
        self._fill(self.public_list, public)
        self._fill(self.history_list, history)
        self._update_buttons()

    @staticmethod
    def _fill(quiz_list: QListWidget, summaries: list[QuizSummary]) -> None:
        quiz_list.clear()
        if not summaries:
            placeholder = QListWidgetItem(LIBRARY_EMPTY_MESSAGE)
            placeholder.setFlags(Qt.NoItemFlags)
            quiz_list.addItem(placeholder)
            return
        for summary in summaries:
            item = QListWidgetItem(_describe(summary))
            item.setData(Qt.UserRole, summary.id)
            quiz_list.addItem(item)

    def _current_list(self) -> QListWidget:
        return self.tabs.currentWidget()

    def _selected_quiz(self) -> tuple[int, str] | None:
        item = self._current_list().currentItem()
        if item is None or item.data(Qt.UserRole) is None:
            return None
        return int(item.data(Qt.UserRole)), item.text().split(" · ", 1)[0]

    def _update_buttons(self) -> None:
        owns_selection = self._current_list() is self.my_list
        self.edit_button.setEnabled(owns_selection)
        self.delete_button.setEnabled(owns_selection)
        self.share_button.setEnabled(owns_selection)

    # --- Actions ---

    def _handle_play(self) -> None:
        selected = self._selected_quiz()
        if selected is None:
            show_info(self, "No quiz", NO_QUIZ_SELECTED_MESSAGE)
            return
        self.on_play(selected[0])

    def _handle_edit(self) -> None:
        selected = self._selected_quiz()
        if selected is None:
            show_info(self, "No quiz", NO_QUIZ_SELECTED_MESSAGE)
            return
        self.on_edit(selected[0])

    def _handle_delete(self) -> None:
        selected = self._selected_quiz()
        if selected is None:
            show_info(self, "No quiz", NO_QUIZ_SELECTED_MESSAGE)
            return
        quiz_id, topic = selected
        if not confirm_delete_quiz(self, topic):
            return
        try:
            self.api.delete_quiz(quiz_id)
        except ApiError as exc:
            show_error(self, "Delete failed", str(exc))
            return
        self.refresh()

    def _handle_share(self) -> None:
        selected = self._selected_quiz()
        if selected is None:
            show_info(self, "No quiz", NO_QUIZ_SELECTED_MESSAGE)
            return
        email = ask_email(self, "Share Quiz", "Share with (e-mail):")
        if email is None:
            return
        try:
            self.api.share_quiz(selected[0], email)
        except ApiError as exc:
            show_warning(self, "Share failed", str(exc))
            return
        show_info(self, "Quiz shared", f"Quiz shared with {email}.")
