from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from deps.services import get_handler
from handler import RequestHandler
from schemas.questions import AnswerIn

router = APIRouter(tags=["answers"])


@router.post("/answer", response_class=PlainTextResponse)
def post_answer(body: AnswerIn, handler: RequestHandler = Depends(get_handler)):
    # counters are bumped against the revision just read; a conflict is a 400
    return handler.submit_answer(body.question, body.correct)
