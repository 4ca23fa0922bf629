"""Tests for answer evaluation across question encodings."""

import pytest

from conftest import make_question
from quizzer.constants.quiz_constants import TIME_UP_ANSWER
from quizzer.core.evaluator import is_correct, resolve_correct_index

CAPITALS = ("Paris", "Rome", "Berlin", "Madrid")


class TestIndexedOptions:
    def test_digit_string_matches_correct_index(self):
        question = make_question(options=CAPITALS, correct_index=0)
        assert is_correct(question, "0") is True

    def test_int_selection(self):
        question = make_question(options=CAPITALS, correct_index=2)
        assert is_correct(question, 2) is True
        assert is_correct(question, 1) is False

    def test_literal_answer_without_index(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="Paris")
        assert is_correct(question, 0) is True
        assert is_correct(question, "Paris") is True
        assert is_correct(question, "  paris ") is True
        assert is_correct(question, 1) is False

    def test_letter_selection_resolves_to_position(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="Berlin")
        assert is_correct(question, "C") is True
        assert is_correct(question, "A") is False

    def test_letter_answer_on_indexed_options(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="B")
        assert resolve_correct_index(question) == 1
        assert is_correct(question, 1) is True
        assert is_correct(question, "B") is True
        assert is_correct(question, "Rome") is True
        assert is_correct(question, 0) is False

    def test_option_text_equal_to_a_letter_wins_over_key(self):
        question = make_question(options=("C", "A", "B"), correct_index=None, answer="A")
        assert resolve_correct_index(question) == 1
        assert is_correct(question, 1) is True
        assert is_correct(question, 0) is False


class TestLetteredOptions:
    def test_letter_answer(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="A", lettered=True)
        assert is_correct(question, "A") is True
        assert is_correct(question, "B") is False

    def test_index_selection_against_letter_answer(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="A", lettered=True)
        assert is_correct(question, 0) is True
        assert is_correct(question, 3) is False

    def test_literal_answer_with_lettered_options(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="Madrid", lettered=True)
        assert is_correct(question, "D") is True
        assert is_correct(question, "Madrid") is True
        assert is_correct(question, "A") is False


class TestEquivalenceAcrossEncodings:
    @pytest.mark.parametrize("selected, expected", [(0, True), ("A", True), ("Paris", True), (1, False), ("B", False)])
    def test_same_verdict_for_every_encoding(self, selected, expected):
        encodings = [
            make_question(options=CAPITALS, correct_index=0),
            make_question(options=CAPITALS, correct_index=None, answer="Paris"),
            make_question(options=CAPITALS, correct_index=None, answer="A", lettered=True),
            make_question(options=CAPITALS, correct_index=None, answer="Paris", lettered=True),
            make_question(options=CAPITALS, correct_index=None, answer="A"),
        ]
        assert {is_correct(question, selected) for question in encodings} == {expected}


class TestNeverRaises:
    def test_time_up_is_incorrect(self):
        question = make_question(options=CAPITALS, correct_index=0)
        assert is_correct(question, TIME_UP_ANSWER) is False

    def test_none_is_incorrect(self):
        assert is_correct(make_question(), None) is False

    def test_out_of_range_index(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="Paris")
        assert is_correct(question, 7) is False

    def test_unknown_text(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="Paris")
        assert is_correct(question, "Lisbon") is False

    def test_answer_matching_no_option(self):
        question = make_question(options=CAPITALS, correct_index=None, answer="Lisbon")
        assert is_correct(question, 0) is False

    @pytest.mark.parametrize("selected", ["\u00b2", "\u0663", "9" * 5000, " 12345 "])
    def test_malformed_digit_selection(self, selected):
        indexed = make_question(options=CAPITALS, correct_index=0)
        literal = make_question(options=CAPITALS, correct_index=None, answer="Paris")
        assert is_correct(indexed, selected) is False
        assert is_correct(literal, selected) is False


class TestResolveCorrectIndex:
    def test_prefers_explicit_index(self):
        assert resolve_correct_index(make_question(correct_index=3)) == 3

    def test_letter_key(self):
        question = make_question(correct_index=None, answer="c", lettered=True)
        assert resolve_correct_index(question) == 2

    def test_literal_text(self):
        question = make_question(correct_index=None, answer="rome")
        assert resolve_correct_index(question) == 1

    def test_unresolvable(self):
        question = make_question(correct_index=None, answer="Lisbon")
        assert resolve_correct_index(question) is None
