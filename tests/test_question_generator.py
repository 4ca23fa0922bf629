from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

from openai import OpenAIError
import pytest

from quizzer.core.errors import GenerationFailure
from quizzer.core.services.question_generator import QuestionGenerator, build_prompt, extract_questions

GOOD_ITEM = {
    "question": "Capital of France?",
    "options": ["Paris", "Rome", "Berlin", "Madrid"],
    "correctAnswer": "Paris",
}


class FakeCompletions:
    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _generator(reply: str | None = None, error: Exception | None = None):
    completions = FakeCompletions(reply, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return QuestionGenerator(model="test-model", client=client), completions


def test_build_prompt_mentions_topic_language_and_exclusions():
    prompt = build_prompt("Volcanoes", 3, "English", ["What is lava?", "Where is Etna?"])
    assert 'topic "Volcanoes"' in prompt
    assert "3 unique multiple-choice questions" in prompt
    assert "Be written in English." in prompt
    assert "Must not repeat any of these existing questions:\n1. What is lava? 2. Where is Etna?" in prompt
    assert prompt.endswith("Return only the JSON array.")


def test_build_prompt_defaults():
    prompt = build_prompt("Volcanoes", 3)
    assert "Be written in Portuguese." in prompt
    assert "existing questions" not in prompt


@pytest.mark.parametrize(
    "reply",
    [
        json.dumps([GOOD_ITEM]),
        "```json\n" + json.dumps([GOOD_ITEM]) + "\n```",
        json.dumps({"questions": [GOOD_ITEM]}),
        '[{"question": "Q", "options": ["a", "b", "c", "d"], "correctAnswer": "a",},]',
        "Sure! Here you go:\n" + json.dumps([GOOD_ITEM]) + "\nEnjoy.",
    ],
)
def test_extract_questions_accepts_common_reply_shapes(reply):
    items = extract_questions(reply)
    assert len(items) == 1
    assert items[0]["options"][0] in ("Paris", "a")


@pytest.mark.parametrize("reply, message", [("", "Empty response"), ("   ", "Empty response"), ("no json here", "valid JSON")])
def test_extract_questions_rejects_unusable_reply(reply, message):
    with pytest.raises(GenerationFailure, match=message) as excinfo:
        extract_questions(reply)
    assert excinfo.value.raw_output == reply


def test_generate_returns_valid_questions_and_skips_bad_ones():
    bad_shape = {"question": "Too few", "options": ["a", "b"], "correctAnswer": "a"}
    no_match = {"question": "Odd", "options": ["a", "b", "c", "d"], "correctAnswer": "z"}
    generator, completions = _generator(json.dumps([GOOD_ITEM, bad_shape, no_match]))

    questions = asyncio.run(generator.generate("Capitals", 3, "English", ["Capital of Spain?"]))

    assert questions == [GOOD_ITEM]
    request = completions.requests[0]
    assert request["model"] == "test-model"
    assert request["messages"][0]["role"] == "user"
    assert "Capital of Spain?" in request["messages"][0]["content"]


def test_generate_fails_when_nothing_usable():
    generator, _ = _generator(json.dumps([{"question": "Odd", "options": ["a", "b", "c", "d"], "correctAnswer": "z"}]))
    with pytest.raises(GenerationFailure, match="no usable questions"):
        asyncio.run(generator.generate("Capitals", 1))


def test_generate_wraps_openai_errors():
    generator, _ = _generator(error=OpenAIError("quota exceeded"))
    with pytest.raises(GenerationFailure, match="quota exceeded"):
        asyncio.run(generator.generate("Capitals", 2))


def test_generate_reports_invalid_json():
    generator, _ = _generator("I cannot help with that")
    with pytest.raises(GenerationFailure) as excinfo:
        asyncio.run(generator.generate("Capitals", 2))
    assert excinfo.value.raw_output == "I cannot help with that"


@pytest.mark.parametrize("count", [0, 21])
def test_generate_rejects_count_out_of_range(count):
    generator, completions = _generator(json.dumps([GOOD_ITEM]))
    with pytest.raises(GenerationFailure, match="between 1 and 20"):
        asyncio.run(generator.generate("Capitals", count))
    assert completions.requests == []
