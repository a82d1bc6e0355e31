from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    GITHUB_API_URL: str = "https://api.github.com"
    # Optional: raises the GitHub rate limit from 60 to 5000 req/h
    GITHUB_TOKEN: Optional[str] = None
    REQUEST_TIMEOUT: float = 15.0

    LOG_LEVEL: str = "INFO"

    # ─── Scan Limits ────────────────────────────────────
    # Hard cap on files collected by the recursive tree walk.
    MAX_FILES: int = 200
    # Only this prefix of the scanned files gets its content fetched
    # for import analysis (keeps us under the API rate limit).
    MAX_ANALYZED_FILES: int = 50
    # Oldest idle sessions are evicted past this many.
    MAX_SESSIONS: int = 100

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache
def get_settings():
    return Settings()
