"""Component for creating and editing quizzes, by hand or with the AI generator."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from quizzer.client.api_client import QuizApiClient
from quizzer.constants.quiz_constants import (
    DEFAULT_GENERATED_QUESTIONS,
    DEFAULT_TIME_LIMIT_SECONDS,
    MAX_GENERATED_QUESTIONS,
    MAX_TIME_LIMIT_SECONDS,
    MIN_GENERATED_QUESTIONS,
    MIN_TIME_LIMIT_SECONDS,
    OPTION_LETTERS,
)
from quizzer.constants.ui_constants import (
    CREATOR_CLEAR_IMAGE_BUTTON,
    CREATOR_DELETE_BUTTON,
    CREATOR_GENERATE_BUTTON,
    CREATOR_INSERT_BUTTON,
    CREATOR_MODE_ADD,
    CREATOR_MODE_REPLACE,
    CREATOR_NEXT_BUTTON,
    CREATOR_PREV_BUTTON,
    CREATOR_PUBLIC_CHECKBOX,
    CREATOR_SAVE_QUESTION_BUTTON,
    CREATOR_SAVE_QUIZ_BUTTON,
    CREATOR_UPLOAD_BUTTON,
    GENERATION_LANGUAGES,
    IMAGE_FILE_FILTER,
    PLACEHOLDER_QUESTION,
    PLACEHOLDER_TOPIC,
)
from quizzer.core.client_session import ClientSession
from quizzer.core.errors import ApiError, GenerationFailure, LoadFailure, QuestionFormatError, QuizValidationError
from quizzer.core.models import OptionLayout, OptionSet, QuizQuestion
from quizzer.core.question_codec import (
    parse_question,
    question_to_dict,
    to_indexed_question,
    validate_authored_quiz,
    validate_quiz_form,
)
from quizzer.ui.dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    show_error,
    show_info,
    show_warning,
)
from quizzer.ui.question_renderer import render_question_with_options

logger = logging.getLogger(__name__)


class CreatorPanel(QWidget):
    """UI component for creating, editing, and navigating quiz questions."""

    def __init__(
        self,
        api: QuizApiClient,
        client_session: ClientSession,
        on_saved: Callable[[int], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.api = api
        self.client_session = client_session
        self.on_saved = on_saved

        self._questions: list[QuizQuestion] = []
        self._current_question_index: int = -1
        self._editing_quiz_id: int | None = None
        self._current_image_url: str | None = None
        self._has_unsaved_changes: bool = False

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Quiz details
        details_row = QHBoxLayout()
        self.topic_input = QLineEdit(self)
        self.topic_input.setPlaceholderText(PLACEHOLDER_TOPIC)
        details_row.addWidget(self.topic_input, stretch=1)
        self.public_checkbox = QCheckBox(CREATOR_PUBLIC_CHECKBOX, self)
        details_row.addWidget(self.public_checkbox)
        self.save_quiz_button = QPushButton(CREATOR_SAVE_QUIZ_BUTTON, self)
        self.save_quiz_button.clicked.connect(self._handle_save_quiz)
        details_row.addWidget(self.save_quiz_button)
        layout.addLayout(details_row)

        # AI generation
        generation_group = QGroupBox("AI generation", self)
        generation_row = QHBoxLayout()
        generation_group.setLayout(generation_row)
        generation_row.addWidget(QLabel("Questions:", self))
        self.generate_count_spinbox = QSpinBox(self)
        self.generate_count_spinbox.setRange(MIN_GENERATED_QUESTIONS, MAX_GENERATED_QUESTIONS)
        self.generate_count_spinbox.setValue(DEFAULT_GENERATED_QUESTIONS)
        generation_row.addWidget(self.generate_count_spinbox)
        generation_row.addWidget(QLabel("Language:", self))
        self.language_combo = QComboBox(self)
        self.language_combo.addItems(list(GENERATION_LANGUAGES))
        generation_row.addWidget(self.language_combo)
        self.generation_mode_combo = QComboBox(self)
        self.generation_mode_combo.addItem(CREATOR_MODE_REPLACE, userData="replace")
        self.generation_mode_combo.addItem(CREATOR_MODE_ADD, userData="add")
        generation_row.addWidget(self.generation_mode_combo)
        self.generate_button = QPushButton(CREATOR_GENERATE_BUTTON, self)
        self.generate_button.clicked.connect(self._handle_generate)
        generation_row.addWidget(self.generate_button)
        layout.addWidget(generation_group)

        # Action buttons
        action_row = QHBoxLayout()
        self.insert_button = QPushButton(CREATOR_INSERT_BUTTON, self)
        self.insert_button.clicked.connect(self._handle_insert_new_draft)
        action_row.addWidget(self.insert_button)

        self.save_button = QPushButton(CREATOR_SAVE_QUESTION_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save_draft)
        action_row.addWidget(self.save_button)

        self.delete_button = QPushButton(CREATOR_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete_draft)
        action_row.addWidget(self.delete_button)

        self.prev_button = QPushButton(CREATOR_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._navigate_drafts(-1))
        action_row.addWidget(self.prev_button)

        self.next_button = QPushButton(CREATOR_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._navigate_drafts(1))
        action_row.addWidget(self.next_button)

        layout.addLayout(action_row)

        # Question input
        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._on_input_changed)
        layout.addWidget(self.question_input)

        # Options input
        options_row = QHBoxLayout()
        self.option_inputs: list[QLineEdit] = []
        for label in OPTION_LETTERS:
            option_input = QLineEdit(self)
            option_input.setPlaceholderText(f"Option {label}")
            option_input.textChanged.connect(self._on_input_changed)
            options_row.addWidget(option_input)
            self.option_inputs.append(option_input)
        layout.addLayout(options_row)

        # Correct option, time limit, image
        settings_row = QHBoxLayout()
        settings_row.addWidget(QLabel("Correct option:", self))
        self.correct_option_combo = QComboBox(self)
        self.correct_option_combo.addItem("Select…", userData=None)
        for index, label in enumerate(OPTION_LETTERS):
            self.correct_option_combo.addItem(label, userData=index)
        self.correct_option_combo.currentIndexChanged.connect(self._on_input_changed)
        settings_row.addWidget(self.correct_option_combo)

        settings_row.addWidget(QLabel("Time limit:", self))
        self.time_limit_spinbox = QSpinBox(self)
        self.time_limit_spinbox.setRange(MIN_TIME_LIMIT_SECONDS, MAX_TIME_LIMIT_SECONDS)
        self.time_limit_spinbox.setSingleStep(5)
        self.time_limit_spinbox.setSuffix(" s")
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
        self.time_limit_spinbox.valueChanged.connect(lambda _: self._on_input_changed())
        settings_row.addWidget(self.time_limit_spinbox)

        settings_row.addStretch()
        self.upload_button = QPushButton(CREATOR_UPLOAD_BUTTON, self)
        self.upload_button.clicked.connect(self._handle_upload_image)
        settings_row.addWidget(self.upload_button)
        self.clear_image_button = QPushButton(CREATOR_CLEAR_IMAGE_BUTTON, self)
        self.clear_image_button.clicked.connect(self._handle_clear_image)
        settings_row.addWidget(self.clear_image_button)
        layout.addLayout(settings_row)

        self.explanation_input = QLineEdit(self)
        self.explanation_input.setPlaceholderText("Explanation shown after answering (optional)")
        self.explanation_input.textChanged.connect(self._on_input_changed)
        layout.addWidget(self.explanation_input)

        # Preview
        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view, stretch=1)

        # Status label
        self.status_label = QLabel("No draft questions yet.", self)
        layout.addWidget(self.status_label)

    # --- Quiz lifecycle ---

    def reset_state(self) -> None:
        """Reset the panel for a brand-new quiz."""
        self._questions = []
        self._current_question_index = -1
        self._editing_quiz_id = None
        self.topic_input.clear()
        self.public_checkbox.setChecked(False)
        self.clear_fields()
        self.status_label.setText("Ready to create a new quiz.")

    def load_quiz(self, quiz_id: int) -> bool:
        """Load an existing quiz for editing. Returns False if it could not be opened."""
        try:
            loaded = self.api.get_quiz(quiz_id)
            questions = [to_indexed_question(question) for question in loaded.questions]
        except (LoadFailure, QuestionFormatError) as exc:
            show_error(self, "Open failed", str(exc))
            return False

        self._questions = questions
        self._editing_quiz_id = loaded.id
        self.topic_input.setText(loaded.topic)
        self.public_checkbox.setChecked(loaded.public)
        self._current_question_index = 0
        self.populate_fields(self._questions[0])
        self.status_label.setText(f"Editing quiz: viewing question 1 of {len(self._questions)}.")
        return True

    def _handle_save_quiz(self) -> None:
        if not self.check_unsaved_changes():
            return
        topic = self.topic_input.text().strip()
        try:
            validate_authored_quiz(topic, self._questions)
        except QuizValidationError as exc:
            show_warning(self, "Quiz incomplete", str(exc))
            return

        payload = [question_to_dict(question) for question in self._questions]
        public = self.public_checkbox.isChecked()
        try:
            if self._editing_quiz_id is None:
                quiz_id = self.api.create_quiz(topic, payload, public=public)
            else:
                quiz_id = self.api.update_quiz(self._editing_quiz_id, topic, payload, public=public)
        except ApiError as exc:
            show_error(self, "Save failed", str(exc))
            return

        logger.info("Saved quiz %s with %s questions", quiz_id, len(payload))
        self._editing_quiz_id = quiz_id
        show_info(self, "Quiz saved", f"Saved \"{topic}\" with {len(payload)} questions.")
        self.on_saved(quiz_id)

    # --- AI generation ---

    def _handle_generate(self) -> None:
        topic = self.topic_input.text().strip()
        count = self.generate_count_spinbox.value()
        errors = validate_quiz_form(topic, count)
        if errors:
            show_warning(self, "Cannot generate", "\n".join(errors.values()))
            return

        replace = self.generation_mode_combo.currentData() == "replace"
        existing = [question.text for question in self._questions]
        self.status_label.setText("Generating questions…")
        try:
            raw_questions = self.api.generate_questions(
                topic,
                count,
                language=self.language_combo.currentText(),
                existing_questions=existing,
            )
        except GenerationFailure as exc:
            self.status_label.setText("Generation failed.")
            show_warning(self, "Generation failed", str(exc))
            return

        generated: list[QuizQuestion] = []
        for raw in raw_questions:
            try:
                generated.append(to_indexed_question(parse_question(raw)))
            except QuestionFormatError as exc:
                logger.warning("Dropping generated question: %s", exc)
        if not generated:
            show_warning(self, "Generation failed", "The generator returned no usable questions.")
            return

        self._questions = generated if replace else self._questions + generated
        self._current_question_index = 0 if replace else len(self._questions) - len(generated)
        self.populate_fields(self._questions[self._current_question_index])
        self.status_label.setText(
            f"Generated {len(generated)} questions. Viewing question "
            f"{self._current_question_index + 1} of {len(self._questions)}."
        )

    # --- Images ---

    def _handle_upload_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, CREATOR_UPLOAD_BUTTON, str(Path.home()), IMAGE_FILE_FILTER)
        if not file_path:
            return
        try:
            self._current_image_url = self.api.upload_image(Path(file_path))
        except (ApiError, OSError) as exc:
            show_error(self, "Upload failed", str(exc))
            return
        self._on_input_changed()

    def _handle_clear_image(self) -> None:
        if self._current_image_url is None:
            return
        self._current_image_url = None
        self._on_input_changed()

    # --- Question drafts ---

    def _on_input_changed(self) -> None:
        self._has_unsaved_changes = True
        self._refresh_preview()

    def _handle_insert_new_draft(self) -> None:
        if not self.check_unsaved_changes():
            return
        self._current_question_index = len(self._questions)
        self.clear_fields()
        self.status_label.setText("Ready to insert a new question.")

    def _handle_save_draft(self) -> None:
        try:
            draft = self._build_draft_from_inputs()
        except QuizValidationError as exc:
            show_warning(self, "Invalid question", str(exc))
            return

        if self._current_question_index == -1 or self._current_question_index >= len(self._questions):
            self._questions.append(draft)
            self._current_question_index = len(self._questions) - 1
        else:
            self._questions[self._current_question_index] = draft

        self._has_unsaved_changes = False
        self.status_label.setText(
            f"Saved question {self._current_question_index + 1} of {len(self._questions)}."
        )

    def _handle_delete_draft(self) -> None:
        if self._current_question_index == -1:
            show_info(self, "No selection", "There is no saved question to delete yet.")
            return

        if self._current_question_index >= len(self._questions):
            self.clear_fields()
            self.status_label.setText("Discarded unsaved question.")
            self._current_question_index = len(self._questions) - 1 if self._questions else -1
            return

        if not confirm_delete_question(self, self._current_question_index + 1):
            return

        del self._questions[self._current_question_index]
        if not self._questions:
            self._current_question_index = -1
            self.clear_fields()
            self.status_label.setText("All questions removed.")
            return

        self._current_question_index = min(self._current_question_index, len(self._questions) - 1)
        self.populate_fields(self._questions[self._current_question_index])
        self.status_label.setText(
            f"Deleted question. Now viewing {self._current_question_index + 1} of {len(self._questions)}."
        )

    def _navigate_drafts(self, step: int) -> None:
        if not self.check_unsaved_changes():
            return
        if not self._questions:
            return
        target = self._current_question_index + step if self._current_question_index != -1 else 0
        target = max(0, min(len(self._questions) - 1, target))
        self._current_question_index = target
        self.populate_fields(self._questions[target])
        self.status_label.setText(f"Viewing question {target + 1} of {len(self._questions)}.")

    def check_unsaved_changes(self) -> bool:
        """Check if there are unsaved changes and prompt user. Returns True if ok to proceed."""
        if not self._has_unsaved_changes:
            return True

        result = check_unsaved_changes(self)

        if result is True:  # Save
            self._handle_save_draft()
            return not self._has_unsaved_changes
        elif result is False:  # Discard
            self._has_unsaved_changes = False
            return True
        else:  # Cancel (None)
            return False

    def clear_fields(self) -> None:
        self.question_input.clear()
        for input_field in self.option_inputs:
            input_field.clear()
        self.correct_option_combo.setCurrentIndex(0)
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
        self.explanation_input.clear()
        self._current_image_url = None
        self._has_unsaved_changes = False
        self._refresh_preview()

    def populate_fields(self, question: QuizQuestion) -> None:
        self.question_input.setPlainText(question.text)
        for field, text in zip(self.option_inputs, question.options.texts):
            field.setText(text)
        if question.correct_index is not None:
            self.correct_option_combo.setCurrentIndex(question.correct_index + 1)
        else:
            self.correct_option_combo.setCurrentIndex(0)
        self.time_limit_spinbox.setValue(question.effective_time_limit)
        self.explanation_input.setText(question.explanation or "")
        self._current_image_url = question.image_url

        self._has_unsaved_changes = False
        self._refresh_preview()

    def _build_draft_from_inputs(self) -> QuizQuestion:
        question_text = self.question_input.toPlainText().strip()
        options = tuple(field.text().strip() for field in self.option_inputs)
        if not question_text:
            raise QuizValidationError("Enter the question text before saving.")
        if any(not option for option in options):
            raise QuizValidationError("All four options are required.")
        correct_data = self.correct_option_combo.currentData()
        if correct_data is None:
            raise QuizValidationError("Select the correct option before saving.")
        return QuizQuestion(
            text=question_text,
            options=OptionSet(OptionLayout.INDEXED, options),
            correct_index=int(correct_data),
            explanation=self.explanation_input.text().strip() or None,
            image_url=self._current_image_url,
            time_limit=int(self.time_limit_spinbox.value()),
        )

    def _refresh_preview(self) -> None:
        question_text = self.question_input.toPlainText()
        options = [field.text() for field in self.option_inputs]
        html = render_question_with_options(
            question_text,
            options,
            dark_mode=self.client_session.dark_mode,
            image_url=self._current_image_url,
        )
        self.preview_view.setHtml(html, QUrl(self.client_session.api_base_url.rstrip("/") + "/"))
