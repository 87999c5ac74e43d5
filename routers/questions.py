from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from deps.services import get_handler
from handler import RequestHandler
from schemas.questions import QuestionOut
from sessions import SessionContext, get_session

logger = logging.getLogger("trivia-server.routes")

router = APIRouter(tags=["questions"])


@router.get("/getquestion", response_model=QuestionOut)
@router.get("/getquestion/{language}", response_model=QuestionOut)
def get_question(
    language: Optional[str] = None,
    session: SessionContext = Depends(get_session),
    handler: RequestHandler = Depends(get_handler),
):
    logger.debug("GET /getquestion language=%s", language)
    return handler.get_one_question(session, language)


@router.get("/getquestions", response_model=List[QuestionOut])
@router.get("/getquestions/{language}", response_model=List[QuestionOut])
def get_questions(
    language: Optional[str] = None,
    session: SessionContext = Depends(get_session),
    handler: RequestHandler = Depends(get_handler),
):
    logger.debug("GET /getquestions language=%s", language)
    return handler.get_many_questions(session, language)
