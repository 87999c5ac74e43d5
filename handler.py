from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Dict, List, Optional, Sequence, Tuple

import config
from errors import InvalidRequest, NotFound, StoreError
from question_store import QuestionStore
from sessions import ASKED_QUESTIONS, SessionContext

logger = logging.getLogger("trivia-server.handler")


def resolve_language(code: Optional[str]) -> str:
    """Field suffix for a language code; EN and anything unsupported map to ""."""
    if code in config.SUPPORTED_LANGUAGES and code != "EN":
        return code
    return ""


def shuffle_answers(
    correct: str, incorrect: Sequence[str], rng: random.Random
) -> Tuple[List[str], str]:
    choices = [correct, *incorrect]
    rng.shuffle(choices)
    return choices, correct


def _text(document: Dict[str, Any], key: str, default: str) -> str:
    v = document.get(key)
    return v if isinstance(v, str) else default


def _count(document: Dict[str, Any], key: str) -> Optional[int]:
    v = document.get(key)
    if isinstance(v, int) and not isinstance(v, bool):
        return v
    return None


def format_question(document: Dict[str, Any], language: str, rng: random.Random) -> Dict[str, Any]:
    correct = _text(document, "correctAnswer" + language, " ")
    raw_incorrect = document.get("incorrectAnswers" + language)
    if not isinstance(raw_incorrect, list):
        raw_incorrect = []
    incorrect = [
        raw_incorrect[i] if i < len(raw_incorrect) and isinstance(raw_incorrect[i], str) else " "
        for i in range(3)
    ]
    choices, correct = shuffle_answers(correct, incorrect, rng)

    return {
        "question": _text(document, "question" + language, "Question not found"),
        "answer1": choices[0],
        "answer2": choices[1],
        "answer3": choices[2],
        "answer4": choices[3],
        "id": _text(document, "_id", ""),
        "correct": correct,
        "timesCorrect": _count(document, "timesCorrect") or 0,
        "timesAttempted": _count(document, "timesAttempted") or 0,
    }


class RequestHandler:
    def __init__(
        self,
        questions: QuestionStore,
        rng: Optional[random.Random] = None,
        batch_size: int = config.QUESTION_BATCH_SIZE,
        fetch_timeout: float = config.FETCH_TIMEOUT_SECONDS,
    ):
        self.questions = questions
        self._rng = rng or random.Random()
        self.batch_size = batch_size
        self.fetch_timeout = fetch_timeout

    def get_one_question(self, session: SessionContext, language: Optional[str]) -> Dict[str, Any]:
        asked = session.get(ASKED_QUESTIONS) or []
        document, updated = self.questions.fetch_unseen_question(asked)
        view = format_question(document, resolve_language(language), self._rng)
        session.set(ASKED_QUESTIONS, updated)
        return view

    def get_many_questions(
        self, session: SessionContext, language: Optional[str], count: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Serve ``count`` questions, one lookup at a time.

        Lookups are serialized so each one sees the ids picked by the previous
        one. A lookup that fails or outlives ``fetch_timeout`` is dropped from
        the batch and the next one continues from the last good asked list.
        """
        suffix = resolve_language(language)
        asked: List[str] = session.get(ASKED_QUESTIONS) or []
        views: List[Dict[str, Any]] = []

        count = self.batch_size if count is None else count

        # one worker per lookup, so a lookup never waits behind a timed-out one
        executor = ThreadPoolExecutor(max_workers=max(count, 1), thread_name_prefix="question-lookup")
        try:
            for _ in range(count):
                future = executor.submit(self.questions.fetch_unseen_question, asked)
                try:
                    document, asked = future.result(timeout=self.fetch_timeout)
                except FutureTimeout:
                    logger.warning("question lookup timed out after %.2fs", self.fetch_timeout)
                    continue
                except (NotFound, StoreError) as e:
                    logger.warning("Could not read a question from the database: %s", e)
                    continue
                views.append(format_question(document, suffix, self._rng))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not views:
            raise NotFound("could not read questions from the database")

        session.set(ASKED_QUESTIONS, asked)
        return views

    def submit_answer(self, question_id: str, was_correct: bool) -> str:
        document = self.questions.read_document(question_id)

        times_attempted = _count(document, "timesAttempted")
        if times_attempted is None:
            raise InvalidRequest(f"question {question_id} has no attempted count")
        times_correct = _count(document, "timesCorrect")
        if times_correct is None:
            raise InvalidRequest(f"question {question_id} has no correct count")
        rev = document.get("_rev")
        if not isinstance(rev, str):
            raise InvalidRequest(f"question {question_id} has no revision")

        updated = dict(document)
        updated["timesAttempted"] = times_attempted + 1
        if was_correct:
            updated["timesCorrect"] = times_correct + 1

        self.questions.apply_update(question_id, rev, updated)
        return f"Question {question_id} updated"
