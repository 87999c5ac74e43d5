from pydantic import BaseModel, StrictBool, StrictStr


class QuestionOut(BaseModel):
    question: str
    answer1: str
    answer2: str
    answer3: str
    answer4: str
    id: str
    correct: str
    timesCorrect: int
    timesAttempted: int


class AnswerIn(BaseModel):
    question: StrictStr
    correct: StrictBool
