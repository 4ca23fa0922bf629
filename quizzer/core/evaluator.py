"""Answer evaluation across the supported question encodings."""

from __future__ import annotations

from quizzer.constants.quiz_constants import OPTION_LETTERS, TIME_UP_ANSWER
from quizzer.core.models import OptionLayout, OptionSet, QuizQuestion

Selection = str | int

_MAX_INDEX_DIGITS = 4


def is_correct(question: QuizQuestion, selected: Selection | None) -> bool:
    """Decide whether ``selected`` answers ``question`` correctly.

    The checks run in a fixed priority because one question can match several
    shapes at once:

    1. ``correct_index`` present and ``selected`` is an index: compare indices.
    2. The answer names an option key (a lettered key, or a bare letter on
       indexed options that matches no option text): compare keys.
    3. Otherwise resolve ``selected`` to option text and compare it with the
       literal answer.

    Anything that does not resolve counts as incorrect; this never raises.
    """
    if selected is None or selected == TIME_UP_ANSWER:
        return False

    options = question.options
    selected_as_index = _parse_index(selected)
    if question.correct_index is not None and selected_as_index is not None:
        return selected_as_index == question.correct_index

    answer_key = _answer_as_key(question)
    if answer_key is not None:
        return _selected_key(options, selected) == answer_key

    selected_text = _selected_text(options, selected)
    expected_text = _literal_answer(question)
    if selected_text is None or expected_text is None:
        return False
    return _normalize(selected_text) == _normalize(expected_text)


def resolve_correct_index(question: QuizQuestion) -> int | None:
    """Return the position of the correct option, or ``None`` if it cannot be found."""
    if question.correct_index is not None:
        return question.correct_index

    answer_key = _answer_as_key(question)
    if answer_key is not None:
        return OPTION_LETTERS.index(answer_key)

    if question.answer is None:
        return None
    return _text_position(question.options, question.answer)


def _answer_as_key(question: QuizQuestion) -> str | None:
    """Return the answer as an option key when it names one."""
    if question.answer is None:
        return None
    key = question.answer.strip().upper()
    options = question.options
    if options.layout is OptionLayout.LETTERED:
        return key if key in options.keys else None
    # Indexed options occasionally carry a bare letter as their answer; an
    # option whose text is literally that letter still wins.
    if key not in OPTION_LETTERS[: len(options)]:
        return None
    if _text_position(options, question.answer) is not None:
        return None
    return key


def _literal_answer(question: QuizQuestion) -> str | None:
    if question.answer is not None:
        return question.answer
    if question.correct_index is not None and question.correct_index < len(question.options):
        return question.options.texts[question.correct_index]
    return None


def _parse_index(selected: Selection) -> int | None:
    if isinstance(selected, bool):
        return None
    if isinstance(selected, int):
        return selected
    stripped = str(selected).strip()
    # isdigit alone lets through superscripts and other non-ASCII digits.
    if stripped.isascii() and stripped.isdigit() and len(stripped) <= _MAX_INDEX_DIGITS:
        return int(stripped)
    return None


def _selected_position(options: OptionSet, selected: Selection) -> int | None:
    """Map a key, index or option text onto an option position."""
    if isinstance(selected, str):
        letter = selected.strip().upper()
        if letter in OPTION_LETTERS[: len(options)]:
            return OPTION_LETTERS.index(letter)

    index = _parse_index(selected)
    if index is not None:
        return index if 0 <= index < len(options) else None

    return _text_position(options, str(selected))


def _text_position(options: OptionSet, value: str) -> int | None:
    wanted = _normalize(value)
    for position, text in enumerate(options.texts):
        if _normalize(text) == wanted:
            return position
    return None


def _selected_key(options: OptionSet, selected: Selection) -> str | None:
    position = _selected_position(options, selected)
    return None if position is None else OPTION_LETTERS[position]


def _selected_text(options: OptionSet, selected: Selection) -> str | None:
    position = _selected_position(options, selected)
    return None if position is None else options.texts[position]


def _normalize(value: str) -> str:
    """Lowercase and collapse whitespace for fair comparison."""
    return " ".join(value.strip().casefold().split())
