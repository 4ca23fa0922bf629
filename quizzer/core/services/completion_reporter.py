"""Sends the final score of a finished quiz session to the server."""

from __future__ import annotations

import logging
from typing import Protocol

from quizzer.core.errors import SubmitFailure
from quizzer.core.models import CompletionRecord

logger = logging.getLogger(__name__)


class CompletionApi(Protocol):
    def report_completion(self, quiz_id: int, score: int) -> CompletionRecord: ...


class CompletionReporter:
    """Fire-and-forget reporter: at most one submission, failures are only logged.

    Whether the score lands on the owner's quiz record or in a public-quiz attempt
    is decided by the server from the quiz's visibility.
    """

    def __init__(self, api: CompletionApi, quiz_id: int) -> None:
        self._api = api
        self._quiz_id = quiz_id
        self._submitted = False
        self._record: CompletionRecord | None = None

    def report(self, score: int, total_questions: int) -> CompletionRecord | None:
        if self._submitted:
            logger.debug("Completion for quiz %s already submitted; ignoring", self._quiz_id)
            return self._record
        self._submitted = True
        try:
            self._record = self._api.report_completion(self._quiz_id, score)
        except SubmitFailure as exc:
            logger.warning(
                "Could not record score %s/%s for quiz %s: %s",
                score,
                total_questions,
                self._quiz_id,
                exc,
            )
            return None
        logger.info("Recorded score %s/%s for quiz %s", score, total_questions, self._quiz_id)
        return self._record

    @property
    def submitted(self) -> bool:
        return self._submitted

    @property
    def record(self) -> CompletionRecord | None:
        return self._record
