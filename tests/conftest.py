import os
import random
import tempfile
import threading
from typing import Any, Dict, List

import pytest

# must be set before db.py is imported anywhere
_DB_DIR = tempfile.mkdtemp(prefix="trivia-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/trivia.db"

from fastapi.testclient import TestClient  # noqa: E402

from bank import load_seeds, seed_questions  # noqa: E402
from db import Base, SessionLocal, engine  # noqa: E402
from errors import ConflictError, NotFound, StoreError  # noqa: E402
from main import app  # noqa: E402
from sessions import session_store  # noqa: E402
from store import RAND_VIEW, Row, next_revision  # noqa: E402


class ScriptedRandom(random.Random):
    """random() returns the scripted values in order."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


class FakeDocumentStore:
    """In-memory DocumentStore with the same view semantics as SqlDocumentStore."""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.queries: List[tuple] = []
        self.updates: List[tuple] = []
        self.fail_queries: set = set()
        self._lock = threading.Lock()

    def add(self, doc_id: str, key: float, **fields) -> None:
        doc = {
            "question": f"Question {doc_id}?",
            "correctAnswer": f"right-{doc_id}",
            "incorrectAnswers": [f"wrong-{doc_id}-{i}" for i in range(3)],
            "timesAttempted": 0,
            "timesCorrect": 0,
        }
        doc.update(fields)
        self.docs[doc_id] = {"key": key, "rev": next_revision(), "doc": doc}

    def _document(self, doc_id: str) -> Dict[str, Any]:
        entry = self.docs[doc_id]
        return {**entry["doc"], "_id": doc_id, "_rev": entry["rev"]}

    def retrieve_by_id(self, doc_id):
        if doc_id not in self.docs:
            raise NotFound(f"document {doc_id} not found")
        return self._document(doc_id)

    def query_ordered(self, view_name, descending, start_key):
        with self._lock:
            n = len(self.queries)
            self.queries.append((descending, start_key))
        assert view_name == RAND_VIEW
        if n in self.fail_queries:
            raise StoreError("query failed")
        if descending:
            ids = [i for i, e in self.docs.items() if e["key"] <= start_key]
        else:
            ids = [i for i, e in self.docs.items() if e["key"] >= start_key]
        ids.sort(key=lambda i: (self.docs[i]["key"], i), reverse=descending)
        return [Row(id=i, key=self.docs[i]["key"], value=self._document(i)) for i in ids]

    def update_by_id(self, doc_id, revision, document):
        if doc_id not in self.docs:
            raise NotFound(f"document {doc_id} not found")
        entry = self.docs[doc_id]
        if entry["rev"] != revision:
            raise ConflictError(f"document {doc_id} revision {revision} is stale")
        entry["doc"] = {k: v for k, v in document.items() if not k.startswith("_")}
        entry["rev"] = next_revision(revision)
        self.updates.append((doc_id, revision))
        return entry["rev"]


@pytest.fixture
def fake_store():
    store = FakeDocumentStore()
    for n in range(1, 8):
        store.add(f"q{n}", key=n / 10)
    return store


@pytest.fixture
def empty_db():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    session_store.clear()
    yield


@pytest.fixture
def seeded_db(empty_db):
    with SessionLocal() as db:
        seed_questions(db, load_seeds(), random.Random(7))
    yield


@pytest.fixture
def client(seeded_db):
    return TestClient(app)
