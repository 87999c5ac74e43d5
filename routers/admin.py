from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from bank import load_seeds, seed_questions
from db import SessionLocal
from deps.auth import require_admin

logger = logging.getLogger("trivia-server.admin")

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reload", dependencies=[Depends(require_admin)])
def reload_questions():
    seeds = load_seeds()
    with SessionLocal() as db:
        n = seed_questions(db, seeds)
    logger.info("seeded %d of %d questions", n, len(seeds))
    return {"ok": True, "inserted": n, "count": len(seeds)}
