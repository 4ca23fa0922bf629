"""Static metadata describing Quizzer."""

APP_NAME = "Quizzer"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Quizzer lets you write quizzes by hand or have them generated by an AI model, "
    "play them against the clock, and share public quizzes with other users."
)

HELP_TEXT = (
    "Sign in, then create a quiz from the Library. In the creator you can type questions "
    "one by one (four options, one correct) or ask the AI generator for a batch on a topic. "
    "Mark a quiz as public to let every user play it; their results are stored as attempts.\n\n"
    "While playing, each question starts after a 3-2-1 countdown and runs on its own timer. "
    "Pick an answer before the time runs out to see whether it was right."
)
