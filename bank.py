from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Annotated, Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

import config
from models import Question
from store import next_revision

logger = logging.getLogger("trivia-server.bank")

ThreeAnswers = Annotated[List[str], Field(min_length=3, max_length=3)]


class QuestionSeed(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id", min_length=1, max_length=64)
    question: str
    correctAnswer: str
    incorrectAnswers: ThreeAnswers
    questionES: Optional[str] = None
    correctAnswerES: Optional[str] = None
    incorrectAnswersES: Optional[ThreeAnswers] = None
    timesAttempted: int = Field(default=0, ge=0)
    timesCorrect: int = Field(default=0, ge=0)
    randKey: Optional[Annotated[float, Field(ge=0, lt=1)]] = None


def _iter_jsonl(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or s.startswith("//"):
                continue
            try:
                yield json.loads(s)
            except json.JSONDecodeError:
                logger.warning("skipping malformed line in %s", p.name)
                continue


def _iter_json(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("skipping malformed file %s", p.name)
            data = []
    if isinstance(data, list):
        yield from data


def load_seeds(data_dir: Path = config.QUESTION_DATA_DIR) -> List[QuestionSeed]:
    seeds: List[QuestionSeed] = []
    if not data_dir.exists():
        return seeds

    for p in sorted(data_dir.rglob("*")):
        if not p.is_file():
            continue
        suf = p.suffix.lower()
        if suf == ".jsonl":
            source = _iter_jsonl(p)
        elif suf == ".json":
            source = _iter_json(p)
        else:
            continue

        for raw in source:
            try:
                seed = QuestionSeed.model_validate(raw)
            except ValidationError as e:
                logger.warning("skipping invalid question in %s: %s", p.name, e.error_count())
                continue
            if seed.timesCorrect > seed.timesAttempted:
                logger.warning("skipping %s: timesCorrect > timesAttempted", seed.id)
                continue
            seeds.append(seed)
    return seeds


def seed_questions(
    db: Session, seeds: Iterable[QuestionSeed], rng: Optional[random.Random] = None
) -> int:
    """Insert seeds whose id is not in the table yet. Returns the number inserted."""
    rng = rng or random.Random()
    existing = set(db.scalars(select(Question.id)))
    inserted = 0
    for seed in seeds:
        if seed.id in existing:
            continue
        doc = seed.model_dump(exclude={"id", "randKey"}, exclude_none=True)
        rand_key = seed.randKey if seed.randKey is not None else rng.random()
        db.add(Question(id=seed.id, rev=next_revision(), rand_key=rand_key, doc=doc))
        existing.add(seed.id)
        inserted += 1
    db.commit()
    return inserted
