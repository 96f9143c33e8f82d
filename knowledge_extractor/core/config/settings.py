# File: knowledge_extractor/core/config/settings.py

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    # --- Paths ---
    # knowledge_extractor/core/config/settings.py -> config -> core -> knowledge_extractor -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent

    # --- Database ---
    # Networked Postgres is optional. Without it (or when it is unreachable)
    # the embedded SQLite file below is used instead.
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL") or None
    SQLITE_PATH: str = os.getenv("SQLITE_PATH", "knowledge.db")

    # --- LLM Provider ---
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-5-nano")
    OPENAI_API_URL: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/responses")
    LLM_TIMEOUT_SEC: float = float(os.getenv("LLM_TIMEOUT_SEC", "30"))

    # --- Server ---
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def USE_MOCK_LLM(self) -> bool:
        # The stub is forced when explicitly requested or when no credential exists.
        if os.getenv("USE_MOCK_LLM", "false").lower() == "true":
            return True
        return not self.OPENAI_API_KEY
