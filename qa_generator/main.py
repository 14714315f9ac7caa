from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler

from .settings import settings
from .routers import qa, export

# ---------- logging ----------
logger.remove()
logger.add(
    lambda msg: print(msg, end=""),
    format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}",
    level="INFO",
)

# ---------- app / limiter ----------
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT])
app = FastAPI(title="Fact-Checked Q&A Generator", version="1.0.0")
app.state.limiter = limiter

# ---------- CORS ----------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "Content-Type", "X-Requested-With"],
    expose_headers=["Content-Disposition"],
)

# SlowAPI middleware + handler
app.add_middleware(SlowAPIMiddleware)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ---------- health ----------
@app.get("/health")
def health():
    model = settings.GEMINI_MODEL if settings.LLM_PROVIDER.lower() == "gemini" else settings.OPENAI_MODEL
    return {
        "ok": True,
        "mock": settings.MOCK_MODE,
        "provider": settings.LLM_PROVIDER,
        "model": model,
        "rate_limit": settings.RATE_LIMIT,
        "max_questions": settings.MAX_QUESTIONS,
        "enrich_sources": settings.ENRICH_SOURCES,
    }

# ---------- routers ----------
app.include_router(qa.router, tags=["qa"])
app.include_router(export.router, tags=["export"])
