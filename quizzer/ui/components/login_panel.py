"""Sign-in and registration form."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizzer.client.api_client import QuizApiClient
from quizzer.constants.ui_constants import (
    LOGIN_BUTTON,
    LOGIN_SWITCH_TO_LOGIN,
    LOGIN_SWITCH_TO_REGISTER,
    LOGIN_TITLE,
    REGISTER_BUTTON,
)
from quizzer.core.client_session import SignedInUser
from quizzer.core.errors import ApiError
from quizzer.styling.styles import Styles
from quizzer.ui.dialog_helpers import show_warning


class LoginPanel(QWidget):
    """Collects credentials and signs the shared client session in."""

    def __init__(
        self,
        api: QuizApiClient,
        on_signed_in: Callable[[SignedInUser], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.api = api
        self.on_signed_in = on_signed_in
        self._register_mode = False

        self._build_ui()
        self._apply_mode()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        self.title_label = QLabel(LOGIN_TITLE, self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        self.title_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.title_label)

        form = QFormLayout()
        self.name_input = QLineEdit(self)
        self.name_label = QLabel("Name:", self)
        form.addRow(self.name_label, self.name_input)

        self.email_input = QLineEdit(self)
        form.addRow("E-mail:", self.email_input)

        self.password_input = QLineEdit(self)
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.returnPressed.connect(self._handle_submit)
        form.addRow("Password:", self.password_input)
        layout.addLayout(form)

        self.submit_button = QPushButton(LOGIN_BUTTON, self)
        self.submit_button.clicked.connect(self._handle_submit)
        layout.addWidget(self.submit_button)

        self.switch_button = QPushButton(LOGIN_SWITCH_TO_REGISTER, self)
        self.switch_button.setFlat(True)
        self.switch_button.clicked.connect(self._toggle_mode)
        layout.addWidget(self.switch_button)

    def _toggle_mode(self) -> None:
        self._register_mode = not self._register_mode
        self._apply_mode()

    def _apply_mode(self) -> None:
        self.name_label.setVisible(self._register_mode)
        self.name_input.setVisible(self._register_mode)
        self.submit_button.setText(REGISTER_BUTTON if self._register_mode else LOGIN_BUTTON)
        self.switch_button.setText(LOGIN_SWITCH_TO_LOGIN if self._register_mode else LOGIN_SWITCH_TO_REGISTER)

    def _handle_submit(self) -> None:
        email = self.email_input.text().strip()
        password = self.password_input.text()
        name = self.name_input.text().strip()
        if not email or not password or (self._register_mode and not name):
            show_warning(self, "Missing details", "Fill in every field.")
            return

        try:
            if self._register_mode:
                user = self.api.register(name, email, password)
            else:
                user = self.api.login(email, password)
        except ApiError as exc:
            show_warning(self, "Sign in failed", str(exc))
            return

        self.reset_state()
        self.on_signed_in(user)

    def reset_state(self) -> None:
        self.password_input.clear()
        self.name_input.clear()
