from __future__ import annotations
import os
from pathlib import Path

import httpx

BASE_DIR   = Path(__file__).resolve().parent.parent
STATIC_DIR = BASE_DIR / "static"

# no key -> AI prediction stays disabled
API_KEY = os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY") or None

GEMINI_MODEL       = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_BASE        = os.getenv("GEMINI_BASE", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
GEMINI_TIMEOUT     = httpx.Timeout(float(os.getenv("GEMINI_TIMEOUT", "30")), connect=5.0)

MIN_DRAWS_FOR_AI = 3

SAMPLE_PATH = Path(os.getenv("SAMPLE_PATH", str(BASE_DIR / "data" / "sample.csv")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST      = os.getenv("HOST", "0.0.0.0")
PORT      = int(os.getenv("PORT", "8000"))
