"""Component that plays a quiz: countdown, timed questions, reveal, summary."""

from __future__ import annotations

from collections.abc import Callable
import logging

from PySide6.QtCore import Qt, QUrl
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quizzer.client.api_client import QuizApiClient
from quizzer.constants.quiz_constants import OPTION_COUNT, OPTION_LETTERS, TIME_LIMIT_WARNING_WINDOW_SECONDS
from quizzer.constants.ui_constants import (
    PLAYER_BACK_BUTTON,
    PLAYER_CORRECT_MESSAGE,
    PLAYER_FINISH_BUTTON,
    PLAYER_INCORRECT_MESSAGE,
    PLAYER_LOADING_MESSAGE,
    PLAYER_NEXT_BUTTON,
    PLAYER_TIME_UP_MESSAGE,
)
from quizzer.core.client_session import ClientSession
from quizzer.core.errors import LoadFailure
from quizzer.core.evaluator import resolve_correct_index
from quizzer.core.services.completion_reporter import CompletionReporter
from quizzer.core.services.quiz_session import QuizSession, SessionPhase
from quizzer.styling.color_palette import theme_for
from quizzer.styling.styles import Styles
from quizzer.ui.qt_scheduler import QtScheduler
from quizzer.ui.question_renderer import render_question

logger = logging.getLogger(__name__)

_PAGE_MESSAGE = 0
_PAGE_COUNTDOWN = 1
_PAGE_QUESTION = 2
_PAGE_SUMMARY = 3


class PlayerPanel(QWidget):
    """Renders a :class:`QuizSession` and forwards the player's clicks to it."""

    def __init__(
        self,
        api: QuizApiClient,
        client_session: ClientSession,
        on_exit: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.api = api
        self.client_session = client_session
        self.on_exit = on_exit

        self._scheduler = QtScheduler(self)
        self._session: QuizSession | None = None
        self._rendered_index: int | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.topic_label = QLabel("", self)
        self.topic_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.topic_label)
        header_row.addStretch()
        self.back_button = QPushButton(PLAYER_BACK_BUTTON, self)
        self.back_button.clicked.connect(self._handle_back)
        header_row.addWidget(self.back_button)
        layout.addLayout(header_row)

        self.page_stack = QStackedWidget(self)
        layout.addWidget(self.page_stack, stretch=1)

        # Loading / error page
        self.message_label = QLabel(PLAYER_LOADING_MESSAGE, self)
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        self.page_stack.addWidget(self.message_label)

        # Countdown page
        self.countdown_label = QLabel("", self)
        self.countdown_label.setAlignment(Qt.AlignCenter)
        self.page_stack.addWidget(self.countdown_label)

        # Question page
        question_page = QWidget(self)
        question_layout = QVBoxLayout()
        question_page.setLayout(question_layout)

        status_row = QHBoxLayout()
        self.progress_label = QLabel("", question_page)
        status_row.addWidget(self.progress_label)
        status_row.addStretch()
        self.score_label = QLabel("", question_page)
        status_row.addWidget(self.score_label)
        status_row.addStretch()
        self.timer_label = QLabel("", question_page)
        status_row.addWidget(self.timer_label)
        question_layout.addLayout(status_row)

        self.question_view = QWebEngineView(question_page)
        question_layout.addWidget(self.question_view, stretch=1)

        self.option_buttons: list[QPushButton] = []
        for index in range(OPTION_COUNT):
            button = QPushButton("", question_page)
            button.clicked.connect(lambda _checked=False, i=index: self._handle_option(i))
            question_layout.addWidget(button)
            self.option_buttons.append(button)

        self.feedback_label = QLabel("", question_page)
        self.feedback_label.setAlignment(Qt.AlignCenter)
        question_layout.addWidget(self.feedback_label)

        self.explanation_label = QLabel("", question_page)
        self.explanation_label.setWordWrap(True)
        question_layout.addWidget(self.explanation_label)

        self.next_button = QPushButton(PLAYER_NEXT_BUTTON, question_page)
        self.next_button.clicked.connect(self._handle_next)
        question_layout.addWidget(self.next_button)

        self.page_stack.addWidget(question_page)

        # Summary page
        self.summary_label = QLabel("", self)
        self.summary_label.setAlignment(Qt.AlignCenter)
        self.summary_label.setStyleSheet(Styles.get_large_label_style())
        self.page_stack.addWidget(self.summary_label)

    # --- Session lifecycle ---

    def start_quiz(self, quiz_id: int) -> None:
        """Fetch ``quiz_id`` and start a fresh session for it."""
        self.stop_quiz()
        self._rendered_index = None
        self.topic_label.setText("")
        session = QuizSession(self._scheduler, reporter=CompletionReporter(self.api, quiz_id))
        session.add_listener(self._render)
        self._session = session
        self._render(session)

        try:
            loaded = self.api.get_quiz(quiz_id)
        except LoadFailure as exc:
            logger.warning("Could not load quiz %s: %s", quiz_id, exc)
            session.fail(str(exc))
            return
        self.topic_label.setText(loaded.topic)
        session.load(loaded.questions)

    def stop_quiz(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def is_playing(self) -> bool:
        return self._session is not None and self._session.phase in (
            SessionPhase.COUNTDOWN,
            SessionPhase.ACTIVE,
            SessionPhase.REVEALED,
        )

    # --- User input ---

    def _handle_option(self, index: int) -> None:
        if self._session is not None:
            self._session.select(index)

    def _handle_next(self) -> None:
        if self._session is not None:
            self._session.advance()

    def _handle_back(self) -> None:
        self.stop_quiz()
        self.on_exit()

    # --- Rendering ---

    def _render(self, session: QuizSession) -> None:
        if session is not self._session:
            return
        theme = theme_for(self.client_session.dark_mode)
        phase = session.phase

        if phase is SessionPhase.LOADING:
            self.message_label.setText(PLAYER_LOADING_MESSAGE)
            self.message_label.setStyleSheet(Styles.get_large_label_style())
            self.page_stack.setCurrentIndex(_PAGE_MESSAGE)
        elif phase is SessionPhase.FAILED:
            self.message_label.setText(session.error_message or "Quiz could not be loaded.")
            self.message_label.setStyleSheet(Styles.get_feedback_style(theme, correct=False))
            self.page_stack.setCurrentIndex(_PAGE_MESSAGE)
        elif phase is SessionPhase.COUNTDOWN:
            self.countdown_label.setText(str(session.countdown_value or ""))
            self.countdown_label.setStyleSheet(Styles.get_countdown_style(theme))
            self.page_stack.setCurrentIndex(_PAGE_COUNTDOWN)
        elif phase in (SessionPhase.ACTIVE, SessionPhase.REVEALED):
            self._render_question(session)
            self.page_stack.setCurrentIndex(_PAGE_QUESTION)
        elif phase is SessionPhase.COMPLETED:
            self.summary_label.setText(
                f"Quiz finished!\nYou scored {session.score} out of {session.total_questions}."
            )
            self.page_stack.setCurrentIndex(_PAGE_SUMMARY)

    def _render_question(self, session: QuizSession) -> None:
        question = session.current_question
        if question is None:
            return
        theme = theme_for(self.client_session.dark_mode)
        revealed = session.phase is SessionPhase.REVEALED

        if self._rendered_index != session.current_index:
            self._rendered_index = session.current_index
            html = render_question(question, dark_mode=self.client_session.dark_mode)
            self.question_view.setHtml(html, QUrl(self.client_session.api_base_url.rstrip("/") + "/"))

        self.progress_label.setText(f"Question {session.current_index + 1} of {session.total_questions}")
        self.score_label.setText(f"Score: {session.score}")

        time_left = session.time_left
        if revealed or time_left is None:
            self.timer_label.setText("")
        else:
            self.timer_label.setText(f"{time_left}s")
            self.timer_label.setStyleSheet(
                Styles.get_timer_style(theme, warning=time_left <= TIME_LIMIT_WARNING_WINDOW_SECONDS)
            )

        correct_index = resolve_correct_index(question) if revealed else None
        selected = session.selected_answer
        for index, (button, (letter, text)) in enumerate(zip(self.option_buttons, question.options.labelled())):
            button.setText(f"{letter}. {text}")
            button.setEnabled(session.phase is SessionPhase.ACTIVE)
            highlight: bool | None = None
            if revealed:
                if index == correct_index:
                    highlight = True
                elif selected == index:
                    highlight = False
            button.setStyleSheet(Styles.get_option_style(theme, highlight))

        if revealed:
            if session.timed_out():
                message, correct = PLAYER_TIME_UP_MESSAGE, False
            elif session.last_answer_correct:
                message, correct = PLAYER_CORRECT_MESSAGE, True
            else:
                answer_letter = OPTION_LETTERS[correct_index] if correct_index is not None else "?"
                message, correct = f"{PLAYER_INCORRECT_MESSAGE} Correct answer: {answer_letter}", False
            self.feedback_label.setText(message)
            self.feedback_label.setStyleSheet(Styles.get_feedback_style(theme, correct=correct))
            self.explanation_label.setText(question.explanation or "")
            self.explanation_label.setVisible(bool(question.explanation))
            self.next_button.setText(PLAYER_FINISH_BUTTON if session.is_last_question() else PLAYER_NEXT_BUTTON)
            self.next_button.setVisible(True)
        else:
            self.feedback_label.setText("")
            self.explanation_label.setVisible(False)
            self.next_button.setVisible(False)
