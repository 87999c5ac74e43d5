from functools import lru_cache

from db import SessionLocal
from handler import RequestHandler
from question_store import QuestionStore
from store import SqlDocumentStore


@lru_cache
def get_handler() -> RequestHandler:
    return RequestHandler(QuestionStore(SqlDocumentStore(SessionLocal)))
