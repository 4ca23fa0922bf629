"""Qt main window switching between login, library, creator and player modes."""

from __future__ import annotations

from enum import Enum, auto
import logging
from pathlib import Path

from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quizzer.client.api_client import QuizApiClient
from quizzer.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from quizzer.constants.ui_constants import (
    NAV_BUTTON_CREATE,
    NAV_BUTTON_DARK_MODE,
    NAV_BUTTON_LIBRARY,
    NAV_BUTTON_LOGOUT,
    WINDOW_TITLE,
)
from quizzer.core.client_session import ClientSession, SignedInUser
from quizzer.core.errors import ApiError
from quizzer.styling.color_palette import theme_for
from quizzer.styling.styles import Styles
from quizzer.ui.components.creator_panel import CreatorPanel
from quizzer.ui.components.library_panel import LibraryPanel
from quizzer.ui.components.login_panel import LoginPanel
from quizzer.ui.components.player_panel import PlayerPanel
from quizzer.ui.dialog_helpers import confirm_leave_quiz, show_info

logger = logging.getLogger(__name__)


class AppMode(Enum):
    """High-level UI mode of the desktop client."""

    LOGIN = auto()
    LIBRARY = auto()
    CREATOR = auto()
    PLAYER = auto()


class MainWindow(QMainWindow):
    """Main Qt window orchestrating the application modes."""

    def __init__(
        self,
        client_session: ClientSession,
        api: QuizApiClient,
        session_file: Path | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1000, 760)

        self.client_session = client_session
        self.api = api
        self.session_file = session_file
        self._mode = AppMode.LOGIN

        self._build_ui()
        self._apply_styles()
        self._restore_sign_in()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_nav_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.login_panel = LoginPanel(self.api, on_signed_in=self._handle_signed_in, parent=self)
        self.library_panel = LibraryPanel(
            self.api,
            on_play=self._start_quiz,
            on_edit=self._edit_quiz,
            parent=self,
        )
        self.creator_panel = CreatorPanel(
            self.api,
            self.client_session,
            on_saved=lambda _quiz_id: self._show_library(),
            parent=self,
        )
        self.player_panel = PlayerPanel(
            self.api,
            self.client_session,
            on_exit=self._show_library,
            parent=self,
        )

        self.mode_stack.addWidget(self.login_panel)
        self.mode_stack.addWidget(self.library_panel)
        self.mode_stack.addWidget(self.creator_panel)
        self.mode_stack.addWidget(self.player_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(AppMode.LOGIN)

    def _build_nav_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.library_button = QPushButton(NAV_BUTTON_LIBRARY, self)
        self.library_button.setCheckable(True)
        self.library_button.clicked.connect(self._handle_library_button)
        button_row.addWidget(self.library_button)

        self.create_button = QPushButton(NAV_BUTTON_CREATE, self)
        self.create_button.setCheckable(True)
        self.create_button.clicked.connect(self._handle_create_button)
        button_row.addWidget(self.create_button)

        button_row.addStretch()

        self.dark_mode_button = QPushButton(NAV_BUTTON_DARK_MODE, self)
        self.dark_mode_button.setCheckable(True)
        self.dark_mode_button.setChecked(self.client_session.dark_mode)
        self.dark_mode_button.clicked.connect(self._handle_toggle_dark_mode)
        button_row.addWidget(self.dark_mode_button)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        self.logout_button = QPushButton(NAV_BUTTON_LOGOUT, self)
        self.logout_button.clicked.connect(self._handle_logout)
        button_row.addWidget(self.logout_button)

        layout.addLayout(button_row)

    def _set_mode(self, mode: AppMode) -> None:
        if self._mode is AppMode.PLAYER and mode is not AppMode.PLAYER:
            self.player_panel.stop_quiz()
        self._mode = mode

        signed_in = mode is not AppMode.LOGIN
        self.library_button.setEnabled(signed_in)
        self.create_button.setEnabled(signed_in)
        self.logout_button.setEnabled(signed_in)
        self.library_button.setChecked(mode is AppMode.LIBRARY)
        self.create_button.setChecked(mode is AppMode.CREATOR)

        index_map = {
            AppMode.LOGIN: 0,
            AppMode.LIBRARY: 1,
            AppMode.CREATOR: 2,
            AppMode.PLAYER: 3,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    # --- Sign in / out ---

    def _restore_sign_in(self) -> None:
        if not self.client_session.is_authenticated():
            return
        try:
            user = self.api.get_user()
        except ApiError as exc:
            if exc.status_code in (401, 404):
                logger.info("Saved sign-in is no longer valid: %s", exc)
                self.client_session.sign_out()
                self._save_session()
                return
            # Server not reachable yet; keep the token and show the cached user.
            logger.warning("Could not verify saved sign-in: %s", exc)
            if self.client_session.user is None:
                return
            user = self.client_session.user
        self.client_session.user = user
        self._show_library()

    def _handle_signed_in(self, user: SignedInUser) -> None:
        logger.info("User %s signed in", user.id)
        self._save_session()
        self._show_library()

    def _handle_logout(self) -> None:
        if not self._leave_current_mode():
            return
        self.api.logout()
        self._save_session()
        self._set_mode(AppMode.LOGIN)

    def _save_session(self) -> None:
        if self.session_file is None:
            return
        try:
            self.client_session.save(self.session_file)
        except OSError as exc:
            logger.warning("Could not save session to %s: %s", self.session_file, exc)

    # --- Navigation ---

    def _leave_current_mode(self) -> bool:
        if self._mode is AppMode.PLAYER and self.player_panel.is_playing():
            return confirm_leave_quiz(self)
        if self._mode is AppMode.CREATOR:
            return self.creator_panel.check_unsaved_changes()
        return True

    def _handle_library_button(self) -> None:
        if not self._leave_current_mode():
            self.library_button.setChecked(False)
            return
        self._show_library()

    def _handle_create_button(self) -> None:
        if not self._leave_current_mode():
            self.create_button.setChecked(False)
            return
        self.creator_panel.reset_state()
        self._set_mode(AppMode.CREATOR)

    def _show_library(self) -> None:
        self._set_mode(AppMode.LIBRARY)
        self.library_panel.refresh()

    def _start_quiz(self, quiz_id: int) -> None:
        self._set_mode(AppMode.PLAYER)
        self.player_panel.start_quiz(quiz_id)

    def _edit_quiz(self, quiz_id: int) -> None:
        if self.creator_panel.load_quiz(quiz_id):
            self._set_mode(AppMode.CREATOR)

    # --- Misc ---

    def _handle_toggle_dark_mode(self) -> None:
        self.dark_mode_button.setChecked(self.client_session.toggle_dark_mode())
        self._save_session()
        self._apply_styles()

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style(theme_for(self.client_session.dark_mode)))

    def closeEvent(self, event) -> None:
        self.player_panel.stop_quiz()
        self._save_session()
        self.api.close()
        super().closeEvent(event)
