import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

import config
from errors import TriviaError
from routers.admin import router as admin_router
from routers.answers import router as answers_router
from routers.health import router as health_router
from routers.questions import router as questions_router

logger = logging.getLogger("trivia-server")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Trivia Server")

app.add_middleware(SessionMiddleware, secret_key=config.SESSION_SECRET)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-admin-token"],
)


@app.exception_handler(TriviaError)
async def trivia_error_handler(request: Request, exc: TriviaError):
    logger.warning("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def bad_body_handler(request: Request, exc: RequestValidationError):
    logger.error("bad %s request to %s", request.method, request.url.path)
    return JSONResponse(status_code=400, content={"detail": "invalid request"})


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(questions_router)  # /getquestion, /getquestions
app.include_router(answers_router)  # /answer
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...
