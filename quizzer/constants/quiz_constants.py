"""Quiz-related constants shared across UI and core layers."""

DEFAULT_TIME_LIMIT_SECONDS: int = 30
MIN_TIME_LIMIT_SECONDS: int = 5
MAX_TIME_LIMIT_SECONDS: int = 300
COUNTDOWN_START: int = 3
TICK_INTERVAL_SECONDS: float = 1.0
TIME_LIMIT_WARNING_WINDOW_SECONDS: int = 10

OPTION_COUNT: int = 4
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")

# Selected-answer value recorded when a question runs out of time.
TIME_UP_ANSWER: str = "time-up"

TOPIC_MIN_LENGTH: int = 3
TOPIC_MAX_LENGTH: int = 100
MIN_GENERATED_QUESTIONS: int = 1
MAX_GENERATED_QUESTIONS: int = 20
DEFAULT_GENERATED_QUESTIONS: int = 5
DEFAULT_GENERATION_LANGUAGE: str = "Portuguese"
