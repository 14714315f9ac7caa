from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List

class Settings(BaseSettings):
    # Oracle provider: openai | gemini
    LLM_PROVIDER: str = "openai"
    MOCK_MODE: bool = False

    # OpenAI
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_SEARCH_TOOL: str = "web_search_preview"

    # Gemini
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Generation knobs
    MAX_QUESTIONS: int = 20
    ENRICH_SOURCES: bool = True

    # Safety/abuse knobs
    RATE_LIMIT: str = "30/minute"
    MAX_SESSIONS: int = 1000

    # CORS
    ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Optional extra frontend
    FRONTEND_ORIGIN: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
if settings.FRONTEND_ORIGIN:
    settings.ALLOW_ORIGINS.append(settings.FRONTEND_ORIGIN)
