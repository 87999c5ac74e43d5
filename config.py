from __future__ import annotations

import os
from pathlib import Path

_BASE = Path(__file__).resolve().parent

SESSION_SECRET = os.getenv("SESSION_SECRET", "temp_secret")
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")

# server-side asked-lists: idle expiry and a cap on live sessions
SESSION_TTL_SECONDS = float(os.getenv("SESSION_TTL_SECONDS", "3600"))
SESSION_MAX_ENTRIES = int(os.getenv("SESSION_MAX_ENTRIES", "10000"))

# /getquestions batch size and the per-lookup deadline
QUESTION_BATCH_SIZE = int(os.getenv("QUESTION_BATCH_SIZE", "5"))
FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "1.0"))

QUESTION_DATA_DIR = Path(os.getenv("QUESTION_DATA_DIR", str(_BASE / "data" / "questions")))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

SUPPORTED_LANGUAGES = ("EN", "ES")
