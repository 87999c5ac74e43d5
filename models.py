from __future__ import annotations

from sqlalchemy import JSON, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Question(Base):
    __tablename__ = "questions"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # CouchDB-style "<generation>-<hex>", checked on every update
    rev: Mapped[str] = mapped_column(String(64))
    # sort key for the randSearch view, uniform in [0, 1)
    rand_key: Mapped[float] = mapped_column(Float, index=True)
    doc: Mapped[dict] = mapped_column(JSON)  # question text, answers, counters
