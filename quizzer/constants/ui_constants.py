"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "Quizzer"
PLACEHOLDER_QUESTION: str = "Enter your question text (supports Markdown + LaTeX)."
PLACEHOLDER_TOPIC: str = "Quiz topic"

NAV_BUTTON_LIBRARY: str = "Library"
NAV_BUTTON_CREATE: str = "Create Quiz"
NAV_BUTTON_DARK_MODE: str = "Dark Mode"
NAV_BUTTON_LOGOUT: str = "Log Out"

LOGIN_TITLE: str = "Sign in to Quizzer"
LOGIN_BUTTON: str = "Sign In"
REGISTER_BUTTON: str = "Create Account"
LOGIN_SWITCH_TO_REGISTER: str = "No account yet? Register"
LOGIN_SWITCH_TO_LOGIN: str = "Already registered? Sign in"

LIBRARY_TAB_MINE: str = "My Quizzes"
LIBRARY_TAB_PUBLIC: str = "Public Quizzes"
LIBRARY_TAB_HISTORY: str = "History"
LIBRARY_PLAY_BUTTON: str = "Play"
LIBRARY_EDIT_BUTTON: str = "Edit"
LIBRARY_DELETE_BUTTON: str = "Delete"
LIBRARY_SHARE_BUTTON: str = "Share"
LIBRARY_REFRESH_BUTTON: str = "Refresh"
LIBRARY_EMPTY_MESSAGE: str = "No quizzes yet."

CREATOR_INSERT_BUTTON: str = "Add New Question"
CREATOR_SAVE_QUESTION_BUTTON: str = "Save Question"
CREATOR_DELETE_BUTTON: str = "Delete Question"
CREATOR_PREV_BUTTON: str = "Previous Question"
CREATOR_NEXT_BUTTON: str = "Next Question"
CREATOR_UPLOAD_BUTTON: str = "Upload Image"
CREATOR_CLEAR_IMAGE_BUTTON: str = "Remove Image"
CREATOR_GENERATE_BUTTON: str = "Generate with AI"
CREATOR_SAVE_QUIZ_BUTTON: str = "Save Quiz"
CREATOR_PUBLIC_CHECKBOX: str = "Public quiz (everyone can play it)"
CREATOR_MODE_REPLACE: str = "Replace current questions"
CREATOR_MODE_ADD: str = "Add to current questions"
IMAGE_FILE_FILTER: str = "Images (*.png *.jpg *.jpeg *.gif *.webp);;All files (*.*)"
GENERATION_LANGUAGES: tuple[str, ...] = ("Portuguese", "English", "Spanish", "French", "German")

PLAYER_NEXT_BUTTON: str = "Next Question"
PLAYER_FINISH_BUTTON: str = "Finish Quiz"
PLAYER_BACK_BUTTON: str = "Back to Library"
PLAYER_LOADING_MESSAGE: str = "Loading quiz…"
PLAYER_TIME_UP_MESSAGE: str = "Time is up!"
PLAYER_CORRECT_MESSAGE: str = "Correct!"
PLAYER_INCORRECT_MESSAGE: str = "Wrong answer."

NO_QUIZ_SELECTED_MESSAGE: str = "Select a quiz first."
