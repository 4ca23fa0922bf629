"""AI quiz generation through the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from quizzer.constants.quiz_constants import (
    DEFAULT_GENERATION_LANGUAGE,
    MAX_GENERATED_QUESTIONS,
    MIN_GENERATED_QUESTIONS,
    OPTION_COUNT,
)
from quizzer.core.errors import GenerationFailure, QuestionFormatError
from quizzer.core.evaluator import resolve_correct_index
from quizzer.core.question_codec import parse_question, question_to_dict

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

GENERATION_PROMPT = (
    'Create a quiz about the topic "{topic}" with {count} unique multiple-choice questions.\n'
    "Each question must:\n"
    "- Be clear, factual and unambiguous.\n"
    "- Be written in {language}.\n"
    f"- Have exactly {OPTION_COUNT} answer options.\n"
    "- Have exactly one correct answer.\n"
)

FORMAT_INSTRUCTIONS = (
    "\nFormat your answer as a JSON array of objects, each one shaped like:\n"
    "{\n"
    '  "question": "Question text",\n'
    '  "options": ["Option A", "Option B", "Option C", "Option D"],\n'
    '  "correctAnswer": "Exact text of the correct option"\n'
    "}\n"
    "Do not include explanations, extra text or code fences. Return only the JSON array."
)

_client: AsyncOpenAI | None = None


def configure_openai(api_key: str | None = None) -> AsyncOpenAI:
    """Create or reuse the shared AsyncOpenAI client."""
    global _client
    if _client is None:
        if not api_key:
            raise GenerationFailure("OPENAI_API_KEY is not configured.")
        _client = AsyncOpenAI(api_key=api_key)
        logger.info("OpenAI async client configured.")
    return _client


def build_prompt(
    topic: str,
    question_count: int,
    language: str | None = None,
    existing_questions: list[str] | None = None,
) -> str:
    prompt = GENERATION_PROMPT.format(
        topic=topic.strip() or "a topic of your choice",
        count=question_count,
        language=language or DEFAULT_GENERATION_LANGUAGE,
    )
    if existing_questions:
        numbered = " ".join(f"{number}. {text}" for number, text in enumerate(existing_questions, start=1))
        prompt += f"- Must not repeat any of these existing questions:\n{numbered}\n"
    return prompt + FORMAT_INSTRUCTIONS


def extract_questions(text: str) -> list[Any]:
    """Pull the question list out of a model reply.

    Accepts a bare JSON array, an object with a ``questions`` array, code fences
    around either, and trailing commas.
    """
    if not text or not text.strip():
        raise GenerationFailure("Empty response from model", raw_output=text)

    cleaned = _FENCE_RE.sub("", text.strip())
    for candidate in (cleaned, _TRAILING_COMMA_RE.sub(r"\1", cleaned)):
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("questions"), list):
            return data["questions"]
        break

    start, end = cleaned.find("["), cleaned.rfind("]")
    if start != -1 and end > start:
        try:
            data = json.loads(cleaned[start : end + 1])
        except ValueError:
            pass
        else:
            if isinstance(data, list):
                return data

    raise GenerationFailure("Model did not return valid JSON", raw_output=text)


class QuestionGenerator:
    """Generates questions for a topic; the client is injectable for tests."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = configure_openai(self._api_key)
        return self._client

    async def generate(
        self,
        topic: str,
        question_count: int,
        language: str | None = None,
        existing_questions: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Return validated question dicts in the AI shape (literal ``correctAnswer``)."""
        if not MIN_GENERATED_QUESTIONS <= question_count <= MAX_GENERATED_QUESTIONS:
            raise GenerationFailure(
                f"Question count must be between {MIN_GENERATED_QUESTIONS} and {MAX_GENERATED_QUESTIONS}."
            )

        prompt = build_prompt(topic, question_count, language, existing_questions)
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            logger.error("OpenAI request failed for topic %r: %s", topic, exc)
            raise GenerationFailure(f"Error generating quiz: {exc}") from exc

        raw = response.choices[0].message.content or ""
        items = extract_questions(raw)

        questions: list[dict[str, Any]] = []
        for number, item in enumerate(items, start=1):
            try:
                question = parse_question(item)
            except QuestionFormatError as exc:
                logger.warning("Skipping generated question %s: %s", number, exc)
                continue
            if resolve_correct_index(question) is None:
                logger.warning("Skipping generated question %s: answer matches no option", number)
                continue
            questions.append(question_to_dict(question))
        if not questions:
            raise GenerationFailure("Model returned no usable questions", raw_output=raw)

        logger.info("Generated %s questions about %r", len(questions), topic)
        return questions
