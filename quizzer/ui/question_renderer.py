"""Question rendering utilities for the creator preview and the player."""

from __future__ import annotations

from quizzer.core.markdown_math_renderer import renderer
from quizzer.core.models import QuizQuestion


def render_question_with_options(
    question_text: str,
    options: list[str],
    font_size: int = 14,
    dark_mode: bool = False,
    image_url: str | None = None,
) -> str:
    """Render a question with its lettered options as an HTML document.

    Used by the creator preview, where the options are still being typed.
    """
    markdown_lines = [question_text.strip() or "(No question text)", ""]
    for idx, option in enumerate(options):
        letter = chr(ord("A") + idx)
        markdown_lines.append(f"**{letter}.** {option or '(empty)'}")
    markdown = "\n\n".join(markdown_lines)
    return renderer.render_full_document(
        markdown, font_size=font_size, dark_mode=dark_mode, image_url=image_url
    )


def render_question(question: QuizQuestion, font_size: int = 16, dark_mode: bool = False) -> str:
    """Render only the question text; the player shows options as buttons."""
    return renderer.render_full_document(
        question.text,
        font_size=font_size,
        dark_mode=dark_mode,
        image_url=question.image_url,
    )
