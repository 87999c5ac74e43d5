from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import ConflictError, NotFound, StoreError
from models import Question

logger = logging.getLogger("trivia-server.store")

RAND_VIEW = "randSearch"


@dataclass(frozen=True)
class Row:
    id: str
    key: float
    value: Dict[str, Any]


class DocumentStore(Protocol):
    def retrieve_by_id(self, doc_id: str) -> Dict[str, Any]: ...

    def query_ordered(self, view_name: str, descending: bool, start_key: float) -> List[Row]: ...

    def update_by_id(self, doc_id: str, revision: str, document: Dict[str, Any]) -> str: ...


def next_revision(revision: str | None = None) -> str:
    """Bump the generation prefix of a "<n>-<hex>" token."""
    generation = 0
    if revision:
        head, _, _ = revision.partition("-")
        if head.isdigit():
            generation = int(head)
    return f"{generation + 1}-{uuid.uuid4().hex}"


def as_document(q: Question) -> Dict[str, Any]:
    document = dict(q.doc or {})
    document["_id"] = q.id
    document["_rev"] = q.rev
    return document


def strip_meta(document: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in document.items() if not k.startswith("_")}


class SqlDocumentStore:
    """DocumentStore over the ``questions`` table.

    Every call opens its own ORM session, so one instance can be shared by
    concurrent requests and by the /getquestions worker threads.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def retrieve_by_id(self, doc_id: str) -> Dict[str, Any]:
        try:
            with self._session_factory() as db:
                q = db.get(Question, doc_id)
                if q is None:
                    raise NotFound(f"document {doc_id} not found")
                return as_document(q)
        except SQLAlchemyError as e:
            logger.error("Error reading document %s from database: %s", doc_id, e)
            raise StoreError(f"failed to read document {doc_id}") from e

    def query_ordered(self, view_name: str, descending: bool, start_key: float) -> List[Row]:
        if view_name != RAND_VIEW:
            raise StoreError(f"unknown view {view_name!r}")

        stmt = select(Question)
        if descending:
            stmt = stmt.where(Question.rand_key <= start_key).order_by(
                Question.rand_key.desc(), Question.id.desc()
            )
        else:
            stmt = stmt.where(Question.rand_key >= start_key).order_by(
                Question.rand_key.asc(), Question.id.asc()
            )

        try:
            with self._session_factory() as db:
                return [Row(id=q.id, key=q.rand_key, value=as_document(q)) for q in db.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("Error reading documents from database: %s", e)
            raise StoreError("failed to query questions") from e

    def update_by_id(self, doc_id: str, revision: str, document: Dict[str, Any]) -> str:
        new_rev = next_revision(revision)
        try:
            with self._session_factory() as db:
                result = db.execute(
                    update(Question)
                    .where(Question.id == doc_id, Question.rev == revision)
                    .values(doc=strip_meta(document), rev=new_rev)
                )
                if result.rowcount == 1:
                    db.commit()
                    return new_rev
                db.rollback()
                exists = db.scalar(select(Question.id).where(Question.id == doc_id))
        except SQLAlchemyError as e:
            logger.error("Error updating document %s in database: %s", doc_id, e)
            raise StoreError(f"failed to update document {doc_id}") from e

        if exists is None:
            raise NotFound(f"document {doc_id} not found")
        raise ConflictError(f"document {doc_id} revision {revision} is stale")
