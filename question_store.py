from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from errors import NotFound
from store import RAND_VIEW, DocumentStore, Row

logger = logging.getLogger("trivia-server.questions")


def _first_unseen(rows: Sequence[Row], asked: set) -> Optional[Row]:
    return next((row for row in rows if row.id not in asked), None)


class QuestionStore:
    """Random, repeat-avoiding question retrieval on top of a DocumentStore."""

    def __init__(self, store: DocumentStore, rng: Optional[random.Random] = None):
        self._store = store
        self._rng = rng or random.Random()

    def fetch_unseen_question(
        self, asked_ids: Sequence[str]
    ) -> Tuple[Dict[str, Any], List[str]]:
        """
        Pick a random question whose id is not in ``asked_ids``.

        Walks the randSearch view from a random key in a random direction, then
        once more in the opposite direction. When every question has been
        asked the returned list restarts with just the question served.
        Returns ``(document, updated_ids)``; ``asked_ids`` itself is not touched.
        """
        descending = self._rng.random() < 0.5
        start_key = self._rng.random()
        asked = set(asked_ids)
        logger.debug("descending=%s start_key=%f", descending, start_key)

        first_rows = self._store.query_ordered(RAND_VIEW, descending, start_key)
        row = _first_unseen(first_rows, asked)
        if row is None:
            logger.debug("descending=%s start_key=%f (retry)", not descending, start_key)
            retry_rows = self._store.query_ordered(RAND_VIEW, not descending, start_key)
            row = _first_unseen(retry_rows, asked)
            if row is None:
                # every question was asked: restart the list with one entry
                fallback = retry_rows or first_rows
                if not fallback:
                    raise NotFound("no questions in the database")
                logger.info("all %d questions asked, resetting asked list", len(asked))
                return fallback[0].value, [fallback[0].id]

        return row.value, [*asked_ids, row.id]

    def read_document(self, doc_id: str) -> Dict[str, Any]:
        return self._store.retrieve_by_id(doc_id)

    def apply_update(self, doc_id: str, revision: str, fields: Dict[str, Any]) -> str:
        return self._store.update_by_id(doc_id, revision, fields)
